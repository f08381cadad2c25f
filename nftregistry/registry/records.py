class TokenRecord:
    """
    Ownership and approval state of one token.

    :ivar token_id: id assigned at mint
    :ivar owner_id: current owner
    :ivar approved_account_ids: account -> approval id
    :ivar next_approval_id: id handed to the next approval, never decreases while ownership holds
    """
    def __init__(self, token_id, owner_id, approved_account_ids=None, next_approval_id=0):
        self.token_id = token_id
        self.owner_id = owner_id
        self.approved_account_ids = dict(approved_account_ids or {})
        self.next_approval_id = next_approval_id

    def approval_id_for(self, account_id):
        return self.approved_account_ids.get(account_id)

    def to_dict(self):
        return {
            'token_id': self.token_id,
            'owner_id': self.owner_id,
            'approved_account_ids': dict(self.approved_account_ids),
            'next_approval_id': self.next_approval_id
        }

    @classmethod
    def from_dict(cls, d):
        return cls(token_id=d['token_id'],
                   owner_id=d['owner_id'],
                   approved_account_ids=d.get('approved_account_ids'),
                   next_approval_id=d.get('next_approval_id', 0))

    def __eq__(self, other):
        if not isinstance(other, TokenRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'TokenRecord({})'.format(self.to_dict())


# Token's information on view methods: the record joined with its metadata
class JsonToken:
    def __init__(self, record: TokenRecord, metadata):
        self.token_id = record.token_id
        self.owner_id = record.owner_id
        self.approved_account_ids = dict(record.approved_account_ids)
        self.metadata = metadata

    def to_dict(self):
        return {
            'token_id': self.token_id,
            'owner_id': self.owner_id,
            'approved_account_ids': dict(self.approved_account_ids),
            'metadata': self.metadata.to_dict()
        }

    def __eq__(self, other):
        if not isinstance(other, JsonToken):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return 'JsonToken({})'.format(self.to_dict())
