from datetime import datetime, timezone
import iso8601

from nftregistry.db.orm import Hash, Variable
from nftregistry.db.driver import RegistryDriver
from nftregistry.exceptions import InvalidArgument
from nftregistry import config


def _from_fields(cls, d, fields, required=()):
    if isinstance(d, cls):
        return d

    if not isinstance(d, dict):
        raise InvalidArgument(message='{} must be an object, got {}'.format(cls.__name__, type(d).__name__))

    unknown = set(d) - set(fields)
    if unknown:
        raise InvalidArgument(message='Unknown {} fields: {}'.format(cls.__name__, ', '.join(sorted(unknown))))

    missing = [f for f in required if d.get(f) is None]
    if missing:
        raise InvalidArgument(message='Missing {} fields: {}'.format(cls.__name__, ', '.join(missing)))

    return cls(**d)


def _parse_time(field, value):
    try:
        return iso8601.parse_date(value)
    except iso8601.ParseError as e:
        raise InvalidArgument(message='{} is not an ISO 8601 time: {!r}'.format(field, value)) from e


class TokenMetadata:
    FIELDS = ('title', 'description', 'media', 'media_hash', 'copies', 'issued_at', 'expires_at',
              'starts_at', 'updated_at', 'extra', 'reference', 'reference_hash')

    def __init__(self, title=None, description=None, media=None, media_hash=None, copies=None, issued_at=None,
                 expires_at=None, starts_at=None, updated_at=None, extra=None, reference=None,
                 reference_hash=None):
        self.title = title  # ex. "Arch Nemesis: Mail Carrier"
        self.description = description
        self.media = media  # URL to associated media, preferably content addressed
        self.media_hash = media_hash  # base64 sha256 of the content behind media
        self.copies = copies
        self.issued_at = issued_at  # ISO 8601
        self.expires_at = expires_at  # ISO 8601
        self.starts_at = starts_at  # ISO 8601
        self.updated_at = updated_at  # ISO 8601
        self.extra = extra  # free payload, can be stringified JSON
        self.reference = reference  # URL to an off-chain JSON file
        self.reference_hash = reference_hash  # base64 sha256 of the reference JSON

    def to_dict(self):
        return {f: getattr(self, f) for f in self.FIELDS}

    @classmethod
    def from_dict(cls, d):
        return _from_fields(cls, d, cls.FIELDS)

    def warnings(self):
        # Hash pairing is advisory only
        w = []
        if self.media is not None and self.media_hash is None:
            w.append('media without media_hash')
        if self.reference is not None and self.reference_hash is None:
            w.append('reference without reference_hash')
        return w

    def validity_window(self):
        starts = _parse_time('starts_at', self.starts_at) if self.starts_at else None
        expires = _parse_time('expires_at', self.expires_at) if self.expires_at else None
        return starts, expires

    def is_active(self, at=None):
        if at is None:
            at = datetime.now(timezone.utc)
        elif isinstance(at, str):
            at = _parse_time('at', at)
        elif not isinstance(at, datetime):
            raise InvalidArgument(message='at must be a datetime or an ISO 8601 string, got {!r}'.format(at))
        elif at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)

        starts, expires = self.validity_window()

        if starts is not None and at < starts:
            return False
        if expires is not None and at >= expires:
            return False
        return True

    def __eq__(self, other):
        if not isinstance(other, TokenMetadata):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'TokenMetadata({})'.format({k: v for k, v in self.to_dict().items() if v is not None})


# NFT registry's metadata, set once at initialization
class ContractMetadata:
    FIELDS = ('spec', 'name', 'symbol', 'icon', 'base_uri', 'reference', 'reference_hash')
    REQUIRED = ('spec', 'name', 'symbol')

    def __init__(self, spec, name, symbol, icon=None, base_uri=None, reference=None, reference_hash=None):
        self.spec = spec  # essentially a version like "nft-1.0.0"
        self.name = name
        self.symbol = symbol
        self.icon = icon  # data URL
        self.base_uri = base_uri  # gateway for decentralized storage assets
        self.reference = reference
        self.reference_hash = reference_hash

    def to_dict(self):
        return {f: getattr(self, f) for f in self.FIELDS}

    @classmethod
    def from_dict(cls, d):
        return _from_fields(cls, d, cls.FIELDS, required=cls.REQUIRED)

    @classmethod
    def default(cls):
        return cls(**config.DEFAULT_CONTRACT_METADATA)

    def __eq__(self, other):
        if not isinstance(other, ContractMetadata):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'ContractMetadata({})'.format(self.to_dict())


class MetadataStore:
    def __init__(self, registry, driver: RegistryDriver):
        self._tokens = Hash(registry, config.TOKEN_METADATA_KEY, driver=driver)
        self._contract = Variable(registry, config.METADATA_KEY, driver=driver)

    def get(self, token_id):
        d = self._tokens[token_id]
        if d is None:
            return None
        return TokenMetadata.from_dict(d)

    def set(self, token_id, metadata: TokenMetadata):
        self._tokens[token_id] = metadata.to_dict()

    def has(self, token_id):
        return token_id in self._tokens

    def get_contract_metadata(self):
        d = self._contract.get()
        if d is None:
            return None
        return ContractMetadata.from_dict(d)

    def set_contract_metadata(self, metadata: ContractMetadata):
        self._contract.set(metadata.to_dict())
