class CallContext:
    """
    Ambient data for one call, handed to every mutating registry operation
    instead of being read from globals.

    :ivar caller: identity invoking the operation
    :ivar attached_value: value deposited with the call
    """
    def __init__(self, caller, attached_value=0):
        self._state = {
            'caller': caller,
            'attached_value': attached_value
        }

    @property
    def caller(self):
        return self._state['caller']

    @property
    def attached_value(self):
        return self._state['attached_value']

    def __repr__(self):
        return 'CallContext(caller={!r}, attached_value={!r})'.format(self.caller, self.attached_value)
