from unittest import TestCase
from nftregistry.db.encoder import encode, decode, MONGO_MAX_INT, MONGO_MIN_INT
from nftregistry.registry.records import TokenRecord


class TestEncode(TestCase):
    def test_int_to_bytes(self):
        i = 1000
        b = '1000'

        self.assertEqual(encode(i), b)

    def test_str_to_bytes(self):
        s = 'hello'
        b = '"hello"'

        self.assertEqual(encode(s), b)

    def test_bool_is_not_wrapped(self):
        self.assertEqual(encode(True), 'true')

    def test_decode_bytes_to_int(self):
        b = '1234'
        i = 1234

        self.assertEqual(decode(b), i)

    def test_decode_bytes_to_str(self):
        b = '"howdy"'
        s = 'howdy'

        self.assertEqual(decode(b), s)

    def test_decode_failure(self):
        b = b'xwow'

        self.assertIsNone(decode(b))

    def test_decode_none(self):
        self.assertIsNone(decode(None))

    def test_big_int_is_wrapped(self):
        i = MONGO_MAX_INT + 1

        self.assertEqual(encode(i), '{{"__big_int__":"{}"}}'.format(i))
        self.assertEqual(decode(encode(i)), i)

    def test_small_big_int_is_wrapped(self):
        i = MONGO_MIN_INT - 1

        self.assertEqual(decode(encode(i)), i)

    def test_big_ints_nested_in_dicts_and_lists(self):
        d = {'a': [1, 2 ** 70], 'b': {'c': 2 ** 65}}

        self.assertIn('__big_int__', encode(d))
        self.assertEqual(decode(encode(d)), d)

    def test_bytes(self):
        b = b'\x00\x01hello'

        self.assertEqual(encode(b), '{"__bytes__":"' + b.hex() + '"}')
        self.assertEqual(decode(encode(b)), b)

    def test_objects_with_to_dict_are_encoded_as_dicts(self):
        record = TokenRecord(token_id=3, owner_id='stu')

        self.assertEqual(decode(encode(record)), record.to_dict())

    def test_unencodable_raises(self):
        with self.assertRaises(TypeError):
            encode(object())
