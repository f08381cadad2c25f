from ..client import RegistryClient
from ..registry.controller import Registry
from ..exceptions import RegistryError
from ..logger import get_logger
from functools import partial

client = RegistryClient()
log = get_logger('RPC')

MALFORMED = 'malformed payload'


def to_json(result):
    if hasattr(result, 'to_dict'):
        return result.to_dict()

    if isinstance(result, (list, tuple)):
        return [to_json(r) for r in result]

    return result


def _error(message, kind='InvalidArgument'):
    return {
        'error': message,
        'type': kind
    }


def call(registry_client: RegistryClient, function_name, sender=None, attached_value=0, **arguments):
    if function_name in Registry.MUTATIONS and sender is None:
        return _error('sender is required for {}'.format(function_name))

    try:
        result = registry_client._abstract_function_call(func=function_name,
                                                         signer=sender,
                                                         attached_value=attached_value,
                                                         **arguments)
    except RegistryError as e:
        return e.to_dict()
    except (TypeError, AssertionError) as e:
        return _error(str(e), kind=e.__class__.__name__)

    return {
        'value': to_json(result)
    }


def get_methods(registry_client: RegistryClient):
    return {
        'mutations': list(Registry.MUTATIONS),
        'views': list(Registry.VIEWS)
    }


# String to callable map for strict RPC capabilities. Explicit for a reason!
command_map = {name: partial(call, function_name=name) for name in Registry.MUTATIONS + Registry.VIEWS}
command_map['get_methods'] = get_methods


# Single function call to map RPC command to an actual Python function. Allows the server to just call this.
def process_json_rpc_command(payload: dict, registry_client: RegistryClient=None):
    command = payload.get('command')
    arguments = payload.get('arguments')

    if command is None or not isinstance(arguments, dict):
        return _error(MALFORMED)

    func = command_map.get(command)

    if func is None:
        return _error("unknown command '{}'".format(command))

    log.debug('RPC {} {}'.format(command, arguments))
    return func(registry_client or client, **arguments)
