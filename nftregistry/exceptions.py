class RegistryError(Exception):
    """
    The base exception for the registry. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    :ivar status: HTTP style status code used by the web layer
    """
    fmt = 'An unspecified error occurred'
    status = 500

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs

    def to_dict(self):
        return {
            'error': str(self),
            'type': self.__class__.__name__
        }


class NotFound(RegistryError):
    """
    The referenced token id does not exist

    :ivar token_id: The id that was looked up
    """
    fmt = "Token '{token_id}' does not exist"
    status = 404


class Unauthorized(RegistryError):
    """
    The caller is neither the owner nor holds a valid approval
    (or is not allowed to mint / manage minters)

    :ivar caller: The identity that attempted the call
    :ivar action: What was attempted
    """
    fmt = "Caller '{caller}' is not authorized to {action}"
    status = 403


class SelfTransfer(RegistryError):
    """
    :ivar token_id: The token being transferred
    :ivar owner_id: Its current owner, also the receiver
    """
    fmt = "Token '{token_id}' is already owned by '{owner_id}'"
    status = 400


class PaymentRequired(RegistryError):
    """
    The anti-spam deposit did not match exactly

    :ivar required: The fee the registry is configured with
    :ivar attached: What the call carried
    """
    fmt = 'Transfer requires an attached value of exactly {required}, got {attached}'
    status = 402


class AlreadyInitialized(RegistryError):
    fmt = "Registry '{name}' is already initialized"
    status = 409


class NotInitialized(RegistryError):
    fmt = "Registry '{name}' has not been initialized"
    status = 409


class InvalidAccount(RegistryError):
    """
    :ivar account_id: The rejected identity
    """
    fmt = "Invalid account id '{account_id}'"
    status = 400


class InvalidArgument(RegistryError):
    fmt = '{message}'
    status = 400


class ApprovalsDisabled(RegistryError):
    fmt = "Approvals are not supported by registry '{name}'"
    status = 400


class StorageFailure(RegistryError):
    """
    The persistence backend is unavailable. Fatal for the call, never retried.

    :ivar reason: Backend error message
    """
    fmt = 'Storage unavailable: {reason}'
    status = 503
