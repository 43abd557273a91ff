class TransferError(Exception):
    """Base class for transfer store failures surfaced to the HTTP layer."""


class TransferNotFound(TransferError):
    pass


class InvalidTransferRequest(TransferError):
    pass


class PayloadTooLarge(TransferError):
    pass


class ArchiveError(TransferError):
    pass
