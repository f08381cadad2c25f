from unittest import TestCase
from nftregistry.webserver import app, client
import json


class TestWebserver(TestCase):
    def setUp(self):
        client.flush()
        self.post('/initialize', {'sender': 'sys'})

    def tearDown(self):
        client.flush()

    def post(self, url, payload):
        _, response = app.test_client.post(url, data=json.dumps(payload))
        return response

    def get(self, url):
        _, response = app.test_client.get(url)
        return response

    def mint(self, owner, title):
        return self.post('/mint', {'sender': 'sys', 'token_owner_id': owner, 'metadata': {'title': title}})

    def test_teapot(self):
        response = self.get('/')
        self.assertEqual(response.status, 418)

    def test_contract_metadata(self):
        response = self.get('/metadata')

        self.assertEqual(response.status, 200)
        self.assertEqual(response.json['value']['spec'], 'nft-1.0.0')

    def test_second_initialize_conflicts(self):
        response = self.post('/initialize', {'sender': 'sys'})

        self.assertEqual(response.status, 409)
        self.assertEqual(response.json['type'], 'AlreadyInitialized')

    def test_mint_and_supply(self):
        response = self.mint('stu', 'X')

        self.assertEqual(response.status, 200)
        self.assertEqual(response.json['value']['token_id'], 0)

        self.assertEqual(self.get('/supply').json['value'], 1)
        self.assertEqual(self.get('/owners/stu/supply').json['value'], 1)

    def test_token_detail(self):
        self.mint('stu', 'X')

        response = self.get('/tokens/0')

        self.assertEqual(response.status, 200)
        self.assertEqual(response.json['value']['owner_id'], 'stu')
        self.assertEqual(response.json['value']['metadata']['title'], 'X')

    def test_missing_token(self):
        response = self.get('/tokens/12')

        self.assertEqual(response.status, 404)
        self.assertEqual(response.json['type'], 'NotFound')

    def test_list_tokens(self):
        for title in ('A', 'B', 'C'):
            self.mint('stu', title)

        response = self.get('/tokens?offset=1&limit=1')

        self.assertEqual(response.status, 200)
        self.assertListEqual([t['token_id'] for t in response.json['value']], [1])

    def test_list_tokens_bad_arguments(self):
        self.assertEqual(self.get('/tokens?offset=abc').status, 400)
        self.assertEqual(self.get('/tokens?offset=-1').status, 400)

    def test_transfer(self):
        self.mint('stu', 'X')

        response = self.post('/tokens/0/transfer', {'sender': 'stu', 'receiver_id': 'raghu', 'memo': 'gift'})

        self.assertEqual(response.status, 200)
        self.assertEqual(response.json['value']['owner_id'], 'raghu')

        tokens = self.get('/owners/raghu/tokens').json['value']

        self.assertListEqual([t['token_id'] for t in tokens], [0])

    def test_unauthorized_transfer(self):
        self.mint('stu', 'X')

        response = self.post('/tokens/0/transfer', {'sender': 'raghu', 'receiver_id': 'raghu'})

        self.assertEqual(response.status, 403)
        self.assertEqual(self.get('/tokens/0').json['value']['owner_id'], 'stu')

    def test_self_transfer(self):
        self.mint('stu', 'X')

        response = self.post('/tokens/0/transfer', {'sender': 'stu', 'receiver_id': 'stu'})

        self.assertEqual(response.status, 400)
        self.assertEqual(response.json['type'], 'SelfTransfer')

    def test_approve_then_transfer(self):
        self.mint('stu', 'X')

        approval_id = self.post('/tokens/0/approve', {'sender': 'stu', 'account_id': 'raghu'}).json['value']

        response = self.post('/tokens/0/transfer', {'sender': 'raghu', 'receiver_id': 'tejas',
                                                    'approval_id': approval_id})

        self.assertEqual(response.status, 200)
        self.assertEqual(response.json['value']['owner_id'], 'tejas')

    def test_revoke(self):
        self.mint('stu', 'X')
        self.post('/tokens/0/approve', {'sender': 'stu', 'account_id': 'raghu'})

        response = self.post('/tokens/0/revoke', {'sender': 'stu', 'account_id': 'raghu'})

        self.assertEqual(response.status, 200)
        self.assertDictEqual(self.get('/tokens/0').json['value']['approved_account_ids'], {})

    def test_mutation_requires_sender(self):
        response = self.post('/mint', {'token_owner_id': 'stu'})

        self.assertEqual(response.status, 400)

    def test_rpc_uses_the_same_registry(self):
        self.mint('stu', 'X')

        response = self.post('/rpc', {'command': 'total_supply', 'arguments': {}})

        self.assertEqual(response.json['value'], 1)
