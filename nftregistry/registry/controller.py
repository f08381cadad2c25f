from nftregistry.db.driver import RegistryDriver
from nftregistry.db.orm import Variable, Hash
from nftregistry.execution.runtime import CallContext
from nftregistry.exceptions import NotFound, Unauthorized, SelfTransfer, PaymentRequired, AlreadyInitialized, \
    NotInitialized, InvalidAccount, InvalidArgument, ApprovalsDisabled
from nftregistry.registry.allocator import IdAllocator
from nftregistry.registry.indices import OwnershipIndex, TokenRecordStore, OwnerTokenIndex
from nftregistry.registry.metadata import MetadataStore, TokenMetadata, ContractMetadata
from nftregistry.registry.records import TokenRecord, JsonToken
from nftregistry.config import RegistryConfig
from nftregistry.logger import get_logger
from nftregistry import config


class Registry:
    """
    The registry controller. The only writer of the allocator, the indices and
    the metadata store.

    Every mutating operation takes a ``CallContext`` first and checks all of
    its preconditions before the first write, so a rejected call stages
    nothing. Writes go to the driver's pending cache; committing them is up to
    the caller (see ``Executor``).
    """

    # Operations that take a CallContext
    MUTATIONS = ('initialize', 'mint', 'transfer', 'approve', 'revoke', 'add_minter', 'revoke_minter')

    VIEWS = ('total_supply', 'owner_supply', 'token_detail', 'list_tokens', 'list_tokens_by_owner',
             'contract_metadata', 'is_approved', 'token_is_active', 'registry_owner', 'is_minter')

    def __init__(self, driver: RegistryDriver=None, name=config.REGISTRY_NAME, registry_config: RegistryConfig=None):
        self.name = name
        self.driver = driver if driver is not None else RegistryDriver()
        self.config = registry_config or RegistryConfig()

        self.allocator = IdAllocator(name, self.driver)
        self.ownership = OwnershipIndex(name, self.driver)
        self.records = TokenRecordStore(name, self.driver)
        self.metadata = MetadataStore(name, self.driver)
        self.owner_tokens = OwnerTokenIndex(name, self.driver)

        self._owner = Variable(name, config.OWNER_KEY, driver=self.driver)
        self._minters = Hash(name, config.MINTERS_KEY, driver=self.driver, default_value=False)

        self.log = get_logger('Registry')

    # Helpers

    def _assert_initialized(self):
        if self._owner.get() is None:
            raise NotInitialized(name=self.name)

    def _assert_approvals(self):
        if not self.config.support_approvals:
            raise ApprovalsDisabled(name=self.name)

    @staticmethod
    def _is_valid_account(account_id):
        return isinstance(account_id, str) and \
            0 < len(account_id) <= config.MAX_ACCOUNT_ID_LENGTH and \
            config.DELIMITER not in account_id

    def _validate_account(self, account_id):
        if not self._is_valid_account(account_id):
            raise InvalidAccount(account_id=account_id)

    @staticmethod
    def _parse_token_id(token_id):
        if isinstance(token_id, bool):
            raise NotFound(token_id=token_id)

        if isinstance(token_id, int):
            parsed = token_id
        elif isinstance(token_id, str) and token_id.isascii() and token_id.isdigit():
            parsed = int(token_id)
        else:
            raise NotFound(token_id=token_id)

        if parsed < 0:
            raise NotFound(token_id=token_id)

        return parsed

    def _require_record(self, token_id):
        parsed = self._parse_token_id(token_id)
        record = self.records.get(parsed)
        if record is None:
            raise NotFound(token_id=token_id)
        return record

    @staticmethod
    def _page(offset, limit):
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            raise InvalidArgument(message='offset must be a non-negative integer, got {!r}'.format(offset))

        if limit is not None and (not isinstance(limit, int) or isinstance(limit, bool) or limit < 0):
            raise InvalidArgument(message='limit must be a non-negative integer, got {!r}'.format(limit))

        return offset, limit

    @staticmethod
    def _matches_approval(stored, approval_id):
        # True == 1 in Python, so only a real int can match
        if not isinstance(approval_id, int) or isinstance(approval_id, bool):
            return False
        return stored == approval_id

    def _can_transfer(self, caller, record: TokenRecord, approval_id):
        if caller == record.owner_id:
            return True

        if not self.config.support_approvals or approval_id is None:
            return False

        stored = record.approval_id_for(caller)
        return stored is not None and self._matches_approval(stored, approval_id)

    def _json_token(self, token_id):
        return JsonToken(self.records.get(token_id), self.metadata.get(token_id))

    def _scan_owner(self, owner_id):
        # O(n) over every id ever minted
        for token_id in range(self.allocator.current()):
            record = self.records.get(token_id)
            if record is not None and record.owner_id == owner_id:
                yield record

    def _owned_ids(self, owner_id):
        if self.config.index_owners:
            return self.owner_tokens.token_ids(owner_id)
        return [record.token_id for record in self._scan_owner(owner_id)]

    # Mutations

    def initialize(self, ctx: CallContext, owner_id=None, metadata=None):
        if self._owner.get() is not None:
            raise AlreadyInitialized(name=self.name)

        owner_id = owner_id if owner_id is not None else ctx.caller
        self._validate_account(owner_id)

        if metadata is None:
            metadata = ContractMetadata.default()
        else:
            metadata = ContractMetadata.from_dict(metadata)

        self._owner.set(owner_id)
        self.metadata.set_contract_metadata(metadata)
        self.allocator.reset()

        self.log.info('Initialized registry {} owned by {} with {}'.format(self.name, owner_id, self.config))
        return metadata

    def mint(self, ctx: CallContext, token_owner_id, metadata=None):
        self._assert_initialized()

        if not self.config.open_minting and not self.is_minter(ctx.caller):
            raise Unauthorized(caller=ctx.caller, action='mint')

        self._validate_account(token_owner_id)

        metadata = TokenMetadata() if metadata is None else TokenMetadata.from_dict(metadata)

        token_id = self.allocator.next()
        record = TokenRecord(token_id=token_id, owner_id=token_owner_id)

        self.ownership.set_owner(token_id, token_owner_id)
        self.records.put(record)
        self.metadata.set(token_id, metadata)

        if self.config.index_owners:
            self.owner_tokens.add(token_owner_id, token_id)

        for warning in metadata.warnings():
            self.log.warning('Token {}: {}'.format(token_id, warning))

        self.log.info('{} minted token {} for {}'.format(ctx.caller, token_id, token_owner_id))
        return record

    def transfer(self, ctx: CallContext, receiver_id, token_id, approval_id=None, memo=None):
        self._assert_initialized()

        record = self._require_record(token_id)

        if not self._can_transfer(ctx.caller, record, approval_id):
            raise Unauthorized(caller=ctx.caller, action='transfer token {}'.format(record.token_id))

        if receiver_id == record.owner_id:
            raise SelfTransfer(token_id=record.token_id, owner_id=record.owner_id)

        self._validate_account(receiver_id)

        if self.config.require_payment and ctx.attached_value != self.config.transfer_fee:
            raise PaymentRequired(required=self.config.transfer_fee, attached=ctx.attached_value)

        previous_owner = record.owner_id

        # A fresh record: approvals and the approval counter do not survive a change of owner
        new_record = TokenRecord(token_id=record.token_id, owner_id=receiver_id)

        self.records.put(new_record)
        self.ownership.set_owner(record.token_id, receiver_id)

        if self.config.index_owners:
            self.owner_tokens.move(record.token_id, previous_owner, receiver_id)

        if memo is not None:
            self.log.info('Transfer of token {} from {} to {} memo: {}'.format(
                record.token_id, previous_owner, receiver_id, memo))
        else:
            self.log.info('Transfer of token {} from {} to {}'.format(record.token_id, previous_owner, receiver_id))

        return new_record

    def approve(self, ctx: CallContext, token_id, account_id):
        self._assert_initialized()
        self._assert_approvals()

        record = self._require_record(token_id)

        if ctx.caller != record.owner_id:
            raise Unauthorized(caller=ctx.caller, action='approve token {}'.format(record.token_id))

        self._validate_account(account_id)

        approval_id = record.next_approval_id
        record.approved_account_ids[account_id] = approval_id
        record.next_approval_id += 1

        self.records.put(record)

        self.log.debug('Token {} approved for {} with approval id {}'.format(record.token_id, account_id, approval_id))
        return approval_id

    def revoke(self, ctx: CallContext, token_id, account_id):
        self._assert_initialized()
        self._assert_approvals()

        record = self._require_record(token_id)

        if ctx.caller != record.owner_id:
            raise Unauthorized(caller=ctx.caller, action='revoke approvals on token {}'.format(record.token_id))

        if record.approved_account_ids.pop(account_id, None) is not None:
            self.records.put(record)
            self.log.debug('Approval of {} on token {} revoked'.format(account_id, record.token_id))

    def add_minter(self, ctx: CallContext, account_id):
        self._assert_initialized()

        if ctx.caller != self._owner.get():
            raise Unauthorized(caller=ctx.caller, action='add minters')

        self._validate_account(account_id)
        self._minters[account_id] = True

    def revoke_minter(self, ctx: CallContext, account_id):
        self._assert_initialized()

        if ctx.caller != self._owner.get():
            raise Unauthorized(caller=ctx.caller, action='revoke minters')

        self._validate_account(account_id)
        del self._minters[account_id]

    # Views

    def total_supply(self):
        self._assert_initialized()
        return self.allocator.current()

    def owner_supply(self, owner_id):
        self._assert_initialized()

        if not self._is_valid_account(owner_id):
            return 0

        if self.config.index_owners:
            return self.owner_tokens.count(owner_id)

        return sum(1 for _ in self._scan_owner(owner_id))

    def token_detail(self, token_id):
        self._assert_initialized()

        parsed = self._parse_token_id(token_id)
        metadata = self.metadata.get(parsed)

        if metadata is None:
            raise NotFound(token_id=token_id)

        return JsonToken(self.records.get(parsed), metadata)

    def iter_tokens(self, offset=0, limit=None):
        self._assert_initialized()
        offset, limit = self._page(offset, limit)

        total = self.allocator.current()
        end = total if limit is None else min(total, offset + limit)

        return (self._json_token(token_id) for token_id in range(offset, end))

    def list_tokens(self, offset=0, limit=None):
        return list(self.iter_tokens(offset=offset, limit=limit))

    def list_tokens_by_owner(self, owner_id):
        self._assert_initialized()

        if not self._is_valid_account(owner_id):
            return []

        return [self._json_token(token_id) for token_id in self._owned_ids(owner_id)]

    def contract_metadata(self):
        self._assert_initialized()
        return self.metadata.get_contract_metadata()

    def is_approved(self, token_id, account_id, approval_id=None):
        self._assert_initialized()

        record = self._require_record(token_id)
        stored = record.approval_id_for(account_id)

        if stored is None:
            return False

        if approval_id is None:
            return True

        return self._matches_approval(stored, approval_id)

    def token_is_active(self, token_id, at=None):
        return self.token_detail(token_id).metadata.is_active(at)

    def registry_owner(self):
        self._assert_initialized()
        return self._owner.get()

    def is_minter(self, account_id):
        if not self._is_valid_account(account_id):
            return False

        if account_id == self._owner.get():
            return True

        return self._minters[account_id] is True
