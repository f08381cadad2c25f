from sanic import Sanic
from sanic.response import json, text
from nftregistry.client import RegistryClient
from nftregistry.db.driver import RegistryDriver, MongoDriver
from nftregistry.config import RegistryConfig
from nftregistry.exceptions import RegistryError
from nftregistry.server.rpc import to_json, process_json_rpc_command
from nftregistry.logger import get_logger
from nftregistry import config
import os

WEB_SERVER_PORT = int(os.getenv('WEB_SERVER_PORT', config.WEB_SERVER_PORT))
# One worker: calls against the registry are totally ordered
NUM_WORKERS = 1

log = get_logger('Webserver')


def _make_driver():
    mongo_url = os.getenv('MONGO_URL')
    if mongo_url:
        return RegistryDriver(MongoDriver(conn_str=mongo_url))
    return RegistryDriver()


app = Sanic('nftregistry')
client = RegistryClient(driver=_make_driver(), registry_config=RegistryConfig.from_env())


def _error(message, status=400, kind='InvalidArgument'):
    return json({'error': message, 'type': kind}, status=status)


def _call(func, **kwargs):
    try:
        result = getattr(client, func)(**kwargs)
    except RegistryError as e:
        return json(e.to_dict(), status=e.status)
    except TypeError as e:
        return _error(str(e))

    return json({'value': to_json(result)}, status=200)


def _int_arg(request, name):
    value = request.args.get(name)
    if value is None:
        return None
    return int(value)


def _body(request):
    body = request.json
    if not isinstance(body, dict):
        return {}
    return body


@app.route('/', methods=['GET'])
async def index(request):
    return text("I\'m a teapot", status=418)


@app.route('/metadata', methods=['GET'])
async def get_contract_metadata(request):
    return _call('contract_metadata')


@app.route('/supply', methods=['GET'])
async def get_total_supply(request):
    return _call('total_supply')


@app.route('/tokens', methods=['GET'])
async def get_tokens(request):
    try:
        offset = _int_arg(request, 'offset') or 0
        limit = _int_arg(request, 'limit')
    except ValueError:
        return _error('offset and limit must be integers')

    return _call('list_tokens', offset=offset, limit=limit)


@app.route('/tokens/<token_id>', methods=['GET'])
async def get_token(request, token_id):
    return _call('token_detail', token_id=token_id)


@app.route('/owners/<owner_id>/supply', methods=['GET'])
async def get_owner_supply(request, owner_id):
    return _call('owner_supply', owner_id=owner_id)


@app.route('/owners/<owner_id>/tokens', methods=['GET'])
async def get_owner_tokens(request, owner_id):
    return _call('list_tokens_by_owner', owner_id=owner_id)


# Mutations expect a json object such that:
'''
{
    'sender': 'string',
    'attached_value': int (optional),
    ...operation arguments
}
'''
def _mutation(request, func, **kwargs):
    body = _body(request)
    sender = body.pop('sender', None)

    if sender is None:
        return _error('sender is required')

    attached_value = body.pop('attached_value', 0)
    body.update(kwargs)

    return _call(func, signer=sender, attached_value=attached_value, **body)


@app.route('/initialize', methods=['POST'])
async def initialize(request):
    return _mutation(request, 'initialize')


@app.route('/mint', methods=['POST'])
async def mint(request):
    return _mutation(request, 'mint')


@app.route('/tokens/<token_id>/transfer', methods=['POST'])
async def transfer(request, token_id):
    return _mutation(request, 'transfer', token_id=token_id)


@app.route('/tokens/<token_id>/approve', methods=['POST'])
async def approve(request, token_id):
    return _mutation(request, 'approve', token_id=token_id)


@app.route('/tokens/<token_id>/revoke', methods=['POST'])
async def revoke(request, token_id):
    return _mutation(request, 'revoke', token_id=token_id)


@app.route('/rpc', methods=['POST'])
async def rpc(request):
    return json(process_json_rpc_command(_body(request), registry_client=client))


def start_webserver():
    log.info('Serving registry {} on port {}'.format(client.name, WEB_SERVER_PORT))
    app.run(host='0.0.0.0', port=WEB_SERVER_PORT, workers=NUM_WORKERS, debug=False, access_log=False)


if __name__ == '__main__':
    start_webserver()
