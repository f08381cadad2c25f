from nftregistry.db.orm import Variable
from nftregistry.db.driver import RegistryDriver
from nftregistry import config


class IdAllocator:
    """Monotonic token id counter. Ids are never reused."""
    def __init__(self, registry, driver: RegistryDriver):
        self._counter = Variable(registry, config.TOKEN_ID_KEY, driver=driver, t=int, default_value=0)

    def reset(self):
        self._counter.set(0)

    def current(self):
        return self._counter.get()

    def next(self):
        token_id = self._counter.get()
        self._counter.set(token_id + 1)
        return token_id
