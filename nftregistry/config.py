import os

REGISTRY_NAME = 'nft'

DELIMITER = ':'
INDEX_SEPARATOR = '.'

# Storage namespaces. Every key is <registry>.<namespace>[:<arg>...]
TOKEN_ID_KEY = 'token_id'
OWNER_KEY = 'owner_id'
METADATA_KEY = 'metadata'
MINTERS_KEY = 'minters'
OWNER_BY_ID_KEY = 'owner_by_id'
TOKEN_BY_ID_KEY = 'token_by_id'
TOKEN_METADATA_KEY = 'token_metadata_by_id'
TOKENS_PER_OWNER_KEY = 'tokens_per_owner'

MAX_HASH_DIMENSIONS = 16
MAX_KEY_SIZE = 1024
MAX_ACCOUNT_ID_LENGTH = 64

PRIVATE_METHOD_PREFIX = '_'

# Anti-spam deposit for transfers. Exact match, not a minimum.
TRANSFER_FEE = 1

CONTRACT_SPEC = 'nft-1.0.0'
DEFAULT_CONTRACT_METADATA = {
    'spec': CONTRACT_SPEC,
    'name': 'NFT Registry',
    'symbol': 'NFT'
}

MONGO_DB = 'nftregistry'
MONGO_COLLECTION = 'state'

WEB_SERVER_PORT = 8080

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class RegistryConfig:
    """
    Feature flags for a registry. One parametric design instead of separate
    registry flavours: payment gating, approvals and mint access are switched
    here.

    :ivar require_payment: transfers must attach exactly ``transfer_fee``
    :ivar support_approvals: ``approve`` / ``revoke`` and approved transfers
    :ivar transfer_fee: the value a gated transfer must attach
    :ivar open_minting: anyone may mint, not only the owner and minters
    :ivar index_owners: keep the owner -> token ids index instead of scanning
    """
    def __init__(self, require_payment=False, support_approvals=True, transfer_fee=TRANSFER_FEE,
                 open_minting=False, index_owners=True):
        self.require_payment = require_payment
        self.support_approvals = support_approvals
        self.transfer_fee = transfer_fee
        self.open_minting = open_minting
        self.index_owners = index_owners

    @classmethod
    def from_env(cls):
        return cls(
            require_payment=_env_flag('NFT_REQUIRE_PAYMENT', False),
            support_approvals=_env_flag('NFT_SUPPORT_APPROVALS', True),
            transfer_fee=int(os.getenv('NFT_TRANSFER_FEE', TRANSFER_FEE)),
            open_minting=_env_flag('NFT_OPEN_MINTING', False),
            index_owners=_env_flag('NFT_INDEX_OWNERS', True)
        )

    def __repr__(self):
        return 'RegistryConfig(require_payment={}, support_approvals={}, transfer_fee={}, ' \
               'open_minting={}, index_owners={})'.format(self.require_payment, self.support_approvals,
                                                          self.transfer_fee, self.open_minting, self.index_owners)
