# -*- coding: utf-8 -*-

import json
import unittest

from divan import exceptions, request
from divan.options import ViewOptions


class BuildRequestTestCase(unittest.TestCase):

    def test_plain_request(self):
        req = request.build_request("GET", "db/doc", query={'rev': '1-abc', 'missing': None})
        self.assertEqual(req.method, "GET")
        self.assertEqual(req.url, "db/doc?rev=1-abc")
        self.assertEqual(req.path, "db/doc")
        self.assertEqual(req.query, "rev=1-abc")
        self.assertIsNone(req.body)
        self.assertFalse(req.stream)

    def test_json_request(self):
        req = request.build_json_request("PUT", "db/doc", {"name": "John Doe", "age": 42})
        self.assertEqual(req.headers["Content-Type"], "application/json")
        self.assertEqual(json.loads(req.body.decode('utf-8')), {"name": "John Doe", "age": 42})

    def test_json_request_encoding_error(self):
        self.assertRaises(exceptions.EncodingError, request.build_json_request,
                          "PUT", "db/doc", {"when": object()})

    def test_headers_are_copied(self):
        headers = {"Accept": "text/plain"}
        req = request.build_request("GET", "db", headers=headers, content_type="text/plain")
        self.assertNotIn("Content-Type", headers)
        self.assertEqual(req.headers, {"Accept": "text/plain", "Content-Type": "text/plain"})


class BuildViewRequestTestCase(unittest.TestCase):

    path = "db/_design/people/_view/by_name"

    def test_without_options(self):
        req = request.build_view_request(self.path)
        self.assertEqual(req.method, "GET")
        self.assertEqual(req.url, self.path)

    def test_get_with_query(self):
        req = request.build_view_request(self.path, ViewOptions(startkey="a", endkey="c", limit=10))
        self.assertEqual(req.method, "GET")
        self.assertEqual(req.url, self.path + "?startkey=%22a%22&endkey=%22c%22&limit=10")
        self.assertIsNone(req.body)
        self.assertNotIn("If-None-Match", req.headers)

    def test_etag_becomes_conditional_header(self):
        req = request.build_view_request(self.path, ViewOptions(etag='"1-abc"'))
        self.assertEqual(req.headers["If-None-Match"], '"1-abc"')
        self.assertEqual(req.url, self.path)

    def test_oversized_keys_are_posted(self):
        keys = ["person-%05d" % i for i in range(500)]
        options = ViewOptions(keys=keys, limit=10, descending=True)
        req = request.build_view_request(self.path, options, max_url_length=2000)
        self.assertEqual(req.method, "POST")
        self.assertEqual(req.url, self.path + "?limit=10&descending=true")
        self.assertEqual(req.headers["Content-Type"], "application/json")
        self.assertEqual(json.loads(req.body.decode('utf-8')), {"keys": keys})

    def test_post_keeps_etag(self):
        options = ViewOptions(keys=["k" * 100] * 50, etag='"x"')
        req = request.build_view_request(self.path, options, max_url_length=1000)
        self.assertEqual(req.method, "POST")
        self.assertEqual(req.headers["If-None-Match"], '"x"')

    def test_path_counts_towards_url_length(self):
        options = ViewOptions(keys=["a"])
        limit = len(self.path) + 1 + len(options.query_string())
        self.assertEqual(request.build_view_request(self.path, options, max_url_length=limit).method, "GET")
        self.assertEqual(request.build_view_request(self.path, options, max_url_length=limit - 1).method, "POST")

    def test_base_url_counts_towards_url_length(self):
        options = ViewOptions(keys=["a"])
        base_url = "http://localhost:5984/"
        limit = len(base_url) + len(self.path) + 1 + len(options.query_string())
        self.assertEqual(request.build_view_request(self.path, options, max_url_length=limit,
                                                    base_url=base_url).method, "GET")
        self.assertEqual(request.build_view_request(self.path, options, max_url_length=limit - 1,
                                                    base_url=base_url).method, "POST")

    def test_raw_key_values_are_not_double_escaped(self):
        keys = ['he said "hi"'] * 300
        req = request.build_view_request(self.path, ViewOptions(keys=keys), max_url_length=100)
        self.assertEqual(json.loads(req.body.decode('utf-8'))["keys"][0], 'he said "hi"')
