from nftregistry.db.orm import Hash
from nftregistry.db.driver import RegistryDriver
from nftregistry.registry.records import TokenRecord
from nftregistry import config


class OwnershipIndex:
    """token id -> current owner"""
    def __init__(self, registry, driver: RegistryDriver):
        self._owners = Hash(registry, config.OWNER_BY_ID_KEY, driver=driver)

    def owner_of(self, token_id):
        return self._owners[token_id]

    def set_owner(self, token_id, owner_id):
        self._owners[token_id] = owner_id


class TokenRecordStore:
    """token id -> TokenRecord. Writes replace the whole record."""
    def __init__(self, registry, driver: RegistryDriver):
        self._records = Hash(registry, config.TOKEN_BY_ID_KEY, driver=driver)

    def get(self, token_id):
        d = self._records[token_id]
        if d is None:
            return None
        return TokenRecord.from_dict(d)

    def put(self, record: TokenRecord):
        self._records[record.token_id] = record.to_dict()

    def has(self, token_id):
        return token_id in self._records


class OwnerTokenIndex:
    """(owner, token id) -> True, kept in step with the ownership index"""
    def __init__(self, registry, driver: RegistryDriver):
        self._tokens = Hash(registry, config.TOKENS_PER_OWNER_KEY, driver=driver)

    def add(self, owner_id, token_id):
        self._tokens[owner_id, token_id] = True

    def remove(self, owner_id, token_id):
        del self._tokens[owner_id, token_id]

    def move(self, token_id, old_owner_id, new_owner_id):
        self.remove(old_owner_id, token_id)
        self.add(new_owner_id, token_id)

    def token_ids(self, owner_id):
        return sorted(int(k) for k in self._tokens.subkeys(owner_id))

    def count(self, owner_id):
        return len(self._tokens.subkeys(owner_id))
