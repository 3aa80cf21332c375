# -*- coding: utf-8 -*-

import unittest

from divan.tests import test_auth, test_bulk, test_client, test_options, test_package, \
    test_request, test_response


def suite():
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for module in (test_package, test_options, test_request, test_response,
                   test_bulk, test_client, test_auth):
        suite.addTest(loader.loadTestsFromModule(module))
    return suite


if __name__ == '__main__':
    unittest.main(defaultTest='suite')
