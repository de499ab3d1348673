"""Exceptions raised by the chunking pipeline."""


class DocChunkError(Exception):
    """Base class for all docchunk errors."""


class ContractViolationError(DocChunkError, ValueError):
    """Input or intermediate data breaks a structural precondition."""


class OutputExistsError(DocChunkError, FileExistsError):
    """Output files are already present and overwriting was not requested."""
