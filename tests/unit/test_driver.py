from unittest import TestCase
from nftregistry.db.driver import InMemDriver, CacheDriver, RegistryDriver


class TestInMemDriver(TestCase):
    def setUp(self):
        self.d = InMemDriver()

    def tearDown(self):
        self.d.flush()

    def test_get_set(self):
        self.d.set('thing', 1234)
        self.assertEqual(self.d.get('thing'), 1234)

    def test_get_missing_is_none(self):
        self.assertIsNone(self.d.get('nothing'))

    def test_set_none_deletes(self):
        self.d.set('thing', 1234)
        self.d.set('thing', None)

        self.assertIsNone(self.d.get('thing'))
        self.assertNotIn('thing', self.d.keys())

    def test_getitem_raises_key_error_when_missing(self):
        with self.assertRaises(KeyError):
            self.d['nothing']

    def test_setitem_delitem(self):
        self.d['thing'] = {'a': 1}
        self.assertEqual(self.d['thing'], {'a': 1})

        del self.d['thing']
        self.assertIsNone(self.d.get('thing'))

    def test_iter_prefix_sorted(self):
        self.d.set('nft.b', 1)
        self.d.set('nft.a', 2)
        self.d.set('other.a', 3)

        self.assertListEqual(self.d.iter('nft.'), ['nft.a', 'nft.b'])

    def test_iter_length(self):
        for i in range(5):
            self.d.set('nft.{}'.format(i), i)

        self.assertEqual(len(self.d.iter('nft.', length=3)), 3)

    def test_batch_write_sets_and_deletes(self):
        self.d.set('gone', 1)

        self.d.batch_write({'a': 1, 'b': 'two', 'gone': None})

        self.assertEqual(self.d.get('a'), 1)
        self.assertEqual(self.d.get('b'), 'two')
        self.assertIsNone(self.d.get('gone'))

    def test_batch_write_bad_value_leaves_db_untouched(self):
        self.d.set('a', 1)

        with self.assertRaises(TypeError):
            self.d.batch_write({'a': 2, 'b': object()})

        self.assertEqual(self.d.get('a'), 1)
        self.assertIsNone(self.d.get('b'))

    def test_flush(self):
        self.d.set('a', 1)
        self.d.flush()

        self.assertListEqual(self.d.keys(), [])


class TestCacheDriver(TestCase):
    def setUp(self):
        self.d = InMemDriver()
        self.c = CacheDriver(self.d)

    def test_get_adds_to_read(self):
        self.c.get('thing')
        self.assertTrue('thing' in self.c.pending_reads)

    def test_set_adds_to_pending_writes(self):
        self.c.set('thing', 1234)
        self.assertEqual(self.c.pending_writes['thing'], 1234)

    def test_pending_write_is_visible_before_commit(self):
        self.c.set('thing', 1234)

        self.assertEqual(self.c.get('thing'), 1234)
        self.assertIsNone(self.d.get('thing'))

    def test_commit_puts_all_objects_in_pending_writes_to_db(self):
        self.c.set('thing1', 1234)
        self.c.set('thing2', 1235)
        self.c.set('thing3', 1236)

        self.assertIsNone(self.d.get('thing1'))

        self.c.commit()

        self.assertEqual(self.d.get('thing1'), 1234)
        self.assertEqual(self.d.get('thing2'), 1235)
        self.assertEqual(self.d.get('thing3'), 1236)
        self.assertDictEqual(self.c.pending_writes, {})

    def test_staged_delete_hides_db_value(self):
        self.d.set('thing', 1)

        self.c.delete('thing')

        self.assertIsNone(self.c.get('thing'))
        self.assertEqual(self.d.get('thing'), 1)

        self.c.commit()

        self.assertIsNone(self.d.get('thing'))

    def test_rollback_resets_all_variables(self):
        self.c.set('thing1', 1234)
        self.c.set('thing2', 1235)
        self.c.get('something')

        self.assertTrue(len(self.c.pending_reads) > 0)
        self.assertTrue(len(self.c.pending_writes) > 0)

        self.c.rollback()

        self.assertFalse(len(self.c.pending_reads) > 0)
        self.assertFalse(len(self.c.pending_writes) > 0)
        self.assertIsNone(self.d.get('thing1'))


class TestRegistryDriver(TestCase):
    def setUp(self):
        self.d = RegistryDriver()

    def tearDown(self):
        self.d.flush()

    def test_make_key(self):
        self.assertEqual(self.d.make_key('nft', 'token_id'), 'nft.token_id')

    def test_make_key_with_args(self):
        self.assertEqual(self.d.make_key('nft', 'tokens_per_owner', ['alice.near', 3]),
                         'nft.tokens_per_owner:alice.near:3')

    def test_items_merges_pending_and_committed(self):
        self.d.set('nft.a:1', 1)
        self.d.commit()
        self.d.set('nft.a:2', 2)

        self.assertDictEqual(self.d.items('nft.a:'), {'nft.a:1': 1, 'nft.a:2': 2})

    def test_items_excludes_staged_deletes(self):
        self.d.set('nft.a:1', 1)
        self.d.set('nft.a:2', 2)
        self.d.commit()

        self.d.delete('nft.a:1')

        self.assertListEqual(self.d.keys('nft.a:'), ['nft.a:2'])
        self.assertListEqual(self.d.values('nft.a:'), [2])

    def test_get_registry_keys(self):
        self.d.set('nft.token_id', 1)
        self.d.set('nft2.token_id', 1)
        self.d.commit()

        self.assertListEqual(self.d.get_registry_keys('nft'), ['nft.token_id'])

    def test_flush_clears_pending_and_db(self):
        self.d.set('nft.a', 1)
        self.d.commit()
        self.d.set('nft.b', 2)

        self.d.flush()

        self.assertIsNone(self.d.get('nft.a'))
        self.assertIsNone(self.d.get('nft.b'))
