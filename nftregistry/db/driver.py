from nftregistry.db.encoder import encode, decode
from nftregistry.exceptions import StorageFailure
from nftregistry import config
from nftregistry.logger import get_logger
from functools import wraps
import pymongo
from pymongo.errors import PyMongoError
import re

logger = get_logger('Driver')

# DB maps bytes to bytes
# Driver maps string to python object


class InMemDriver:
    def __init__(self):
        self.db = {}

    def get(self, item: str):
        key = item.encode()
        value = self.db.get(key)
        if value is None:
            return None
        return decode(value)

    def set(self, key: str, value):
        if value is None:
            self.__delitem__(key)
        else:
            self.db[key.encode()] = encode(value).encode()

    def batch_write(self, writes: dict):
        # Encode everything first so a bad value leaves the db untouched
        staged = {}
        for k, v in writes.items():
            staged[k.encode()] = None if v is None else encode(v).encode()

        for k, v in staged.items():
            if v is None:
                self.db.pop(k, None)
            else:
                self.db[k] = v

    def delete(self, key: str):
        self.__delitem__(key)

    def iter(self, prefix: str, length=0):
        p = prefix.encode()

        l = []
        for k in sorted(self.db.keys()):
            if k.startswith(p):
                l.append(k.decode())
            if 0 < length <= len(l):
                break

        return l

    def keys(self):
        return sorted([k.decode() for k in self.db.keys()])

    def flush(self):
        self.db.clear()

    def __getitem__(self, item: str):
        value = self.get(item)
        if value is None:
            raise KeyError(item)
        return value

    def __setitem__(self, key: str, value):
        self.set(key, value)

    def __delitem__(self, key: str):
        self.db.pop(key.encode(), None)


def _guard(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            logger.error('Mongo operation {} failed: {}'.format(func.__name__, e))
            raise StorageFailure(reason=str(e)) from e
    return wrapper


class MongoDriver:
    # conn_str see https://www.mongodb.com/docs/manual/reference/connection-string/
    def __init__(self, conn_str='mongodb://localhost:27017', db=config.MONGO_DB, collection=config.MONGO_COLLECTION,
                 client=None):
        self.client = client or pymongo.MongoClient(conn_str)
        self.collection = self.client[db][collection]
        self._ensure_index()

    @_guard
    def _ensure_index(self):
        self.collection.create_index('rawKey', unique=True)

    @_guard
    def get(self, item: str):
        v = self.collection.find_one({'rawKey': item})
        if v is None:
            return None

        return decode(v['value'])

    @_guard
    def set(self, key, value):
        if value is None:
            self.collection.delete_one({'rawKey': key})
        else:
            self.collection.update_one({'rawKey': key}, {'$set': {'value': encode(value)}}, upsert=True)

    @_guard
    def batch_write(self, writes: dict):
        if not writes:
            return

        ops = []
        for k, v in writes.items():
            if v is None:
                ops.append(pymongo.DeleteOne({'rawKey': k}))
            else:
                ops.append(pymongo.UpdateOne({'rawKey': k}, {'$set': {'value': encode(v)}}, upsert=True))

        # All or nothing. Transactions need a replica set or sharded cluster
        with self.client.start_session() as session:
            with session.start_transaction():
                self.collection.bulk_write(ops, ordered=True, session=session)

    def delete(self, key: str):
        self.set(key, None)

    @_guard
    def iter(self, prefix: str, length=0):
        cur = self.collection.find({'rawKey': {'$regex': '^{}'.format(re.escape(prefix))}})
        cur = cur.sort('rawKey', pymongo.ASCENDING)

        if length > 0:
            cur = cur.limit(length)

        return [entry['rawKey'] for entry in cur]

    @_guard
    def keys(self):
        k = []
        for entry in self.collection.find({}):
            k.append(entry['rawKey'])
        k.sort()
        return k

    @_guard
    def flush(self):
        self.collection.delete_many({})

    def __getitem__(self, item: str):
        value = self.get(item)
        if value is None:
            raise KeyError(item)
        return value

    def __setitem__(self, key: str, value):
        self.set(key, value)

    def __delitem__(self, key: str):
        self.delete(key)


class CacheDriver:
    def __init__(self, driver=None):
        self.pending_writes = {}  # L1 cache, None marks a delete
        self.pending_reads = {}
        self.driver = driver or InMemDriver()  # L0

    def find(self, key: str):
        if key in self.pending_writes:
            return self.pending_writes[key]

        return self.driver.get(key)

    def get(self, key: str, save: bool = True):
        value = self.find(key)

        if save and key not in self.pending_reads:
            self.pending_reads[key] = value

        return value

    def set(self, key, value):
        if key not in self.pending_reads:
            self.get(key)

        self.pending_writes[key] = value

    def delete(self, key):
        self.set(key, None)

    # Push every staged write to the backing driver in one batch
    def commit(self):
        self.driver.batch_write(dict(self.pending_writes))

        self.pending_writes.clear()
        self.pending_reads = {}

    def rollback(self):
        # Returns to disk state which should be whatever it was prior to any write sessions
        self.pending_reads = {}
        self.pending_writes.clear()

    def clear_pending_state(self):
        self.rollback()


class RegistryDriver(CacheDriver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.delimiter = config.INDEX_SEPARATOR

    def items(self, prefix=''):
        _items = {}
        staged = set()

        for k, v in self.pending_writes.items():
            if k.startswith(prefix):
                staged.add(k)
                if v is not None:
                    _items[k] = v

        # Get all of the keys we need, minus the ones already staged (written or deleted)
        db_keys = set(self.driver.iter(prefix=prefix))

        for k in db_keys - staged:
            _items[k] = self.get(k)

        return dict(sorted(_items.items()))

    def keys(self, prefix=''):
        return list(self.items(prefix).keys())

    def values(self, prefix=''):
        return list(self.items(prefix).values())

    def make_key(self, registry, variable, args=[]):
        registry_variable = self.delimiter.join((registry, variable))
        if args:
            return config.DELIMITER.join((registry_variable, *[str(arg) for arg in args]))
        return registry_variable

    def get_registry_keys(self, name):
        return self.keys(name + self.delimiter)

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()
