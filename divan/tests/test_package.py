# -*- coding: utf-8 -*-

import unittest
import divan


class TestPackage(unittest.TestCase):

    def test_exports(self):
        expected = set([
            # divan.client
            'Server', 'Database', 'Attachment',
            # divan.document
            'Document', 'SecurityDocument',
            # divan.options
            'ViewOptions', 'EncodedQuery',
            # divan.bulk
            'BulkWrite', 'BulkResult',
            'ClientConfig',
            'exceptions',
        ])
        exported = set(e for e in dir(divan) if not e.startswith('_'))
        self.assertTrue(expected <= exported)
