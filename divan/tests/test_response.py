# -*- coding: utf-8 -*-

import unittest

from divan import exceptions, response
from divan.document import Document
from divan.response import CouchResponse
from divan.tests.testutil import make_response


def couch_response(*args, **kwargs):
    return CouchResponse(make_response(*args, **kwargs))


class CouchResponseTestCase(unittest.TestCase):

    def test_lazy_json(self):
        resp = couch_response(200, {"ok": True})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.ok)
        self.assertIs(resp.json(), resp.json())

    def test_description_from_body(self):
        resp = couch_response(409, {"error": "conflict", "reason": "Document update conflict."})
        self.assertEqual(resp.description, "Document update conflict.")

    def test_description_falls_back_to_reason(self):
        resp = couch_response(500, "<html>oops</html>", reason="Internal Server Error")
        self.assertEqual(resp.description, "Internal Server Error")

    def test_etag(self):
        resp = couch_response(200, {}, headers={"ETag": '"abc"'})
        self.assertEqual(resp.etag, '"abc"')


class DecodeDocumentTestCase(unittest.TestCase):

    def test_found(self):
        doc = response.decode_document(couch_response(200, {"_id": "x", "_rev": "1-a", "n": 1}))
        self.assertIsInstance(doc, Document)
        self.assertEqual((doc.id, doc.rev, doc["n"]), ("x", "1-a", 1))

    def test_not_found_is_none(self):
        resp = couch_response(404, {"error": "not_found", "reason": "missing"})
        self.assertIsNone(response.decode_document(resp))

    def test_wrapper(self):
        doc = response.decode_document(couch_response(200, {"_id": "x"}), wrapper=None)
        self.assertEqual(type(doc), dict)

    def test_other_errors_raise(self):
        resp = couch_response(401, {"error": "unauthorized", "reason": "Name or password is incorrect."})
        with self.assertRaises(exceptions.HTTPUnauthorized) as ctx:
            response.decode_document(resp)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.message, "Name or password is incorrect.")


class DecodeWriteTestCase(unittest.TestCase):

    def test_created_and_accepted(self):
        data = {"ok": True, "id": "x", "rev": "1-a"}
        self.assertEqual(response.decode_write(couch_response(201, data)), data)
        self.assertEqual(response.decode_write(couch_response(202, data)), data)

    def test_conflict(self):
        resp = couch_response(409, {"error": "conflict", "reason": "Document update conflict."})
        with self.assertRaises(exceptions.UpdateConflict) as ctx:
            response.decode_write(resp)
        self.assertIsInstance(ctx.exception, exceptions.HTTPConflict)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.message, "Document update conflict.")

    def test_ok_is_not_a_write_success(self):
        with self.assertRaises(exceptions.HTTPError) as ctx:
            response.decode_write(couch_response(200, {"ok": True}))
        self.assertEqual(ctx.exception.status_code, 200)

    def test_unknown_status(self):
        with self.assertRaises(exceptions.HTTPError) as ctx:
            response.decode_write(couch_response(503, {"error": "unavailable", "reason": "try later"}))
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(str(ctx.exception), "try later")

    def test_accepted_only(self):
        self.assertEqual(response.decode_accepted(couch_response(202, {"ok": True})), {"ok": True})
        self.assertRaises(exceptions.HTTPError, response.decode_accepted, couch_response(200, {"ok": True}))


class DecodeViewTestCase(unittest.TestCase):

    def test_rows_keep_server_order(self):
        body = {
            "total_rows": 4, "offset": 1,
            "rows": [
                {"id": "b", "key": "x", "value": 1},
                {"id": "a", "key": "x", "value": 1},
                {"id": "a", "key": "x", "value": 1},
            ],
        }
        result = response.decode_view(couch_response(200, body, headers={"ETag": '"v1"'}))
        self.assertEqual([row.id for row in result], ["b", "a", "a"])
        self.assertEqual(result.total_rows, 4)
        self.assertEqual(result.offset, 1)
        self.assertEqual(result.etag, '"v1"')
        self.assertFalse(result.not_modified)

    def test_included_docs_and_errors(self):
        body = {"rows": [
            {"id": "a", "key": "a", "value": {"rev": "1-x"}, "doc": {"_id": "a", "_rev": "1-x"}},
            {"key": "zz", "error": "not_found"},
        ]}
        result = response.decode_view(couch_response(200, body), wrapper=Document)
        self.assertIsInstance(result[0].doc, Document)
        self.assertEqual(result[0].doc.rev, "1-x")
        self.assertEqual(result[1].error, "not_found")
        self.assertIsNone(result[1].doc)

    def test_reduce_rows(self):
        result = response.decode_view(couch_response(200, {"rows": [{"key": None, "value": 12}]}))
        self.assertEqual(result[0].value, 12)
        self.assertIsNone(result.total_rows)

    def test_not_modified(self):
        result = response.decode_view(couch_response(304, headers={"ETag": '"v1"'}))
        self.assertTrue(result.not_modified)
        self.assertEqual(len(result), 0)
        self.assertEqual(result.etag, '"v1"')

    def test_missing_view_is_none(self):
        resp = couch_response(404, {"error": "not_found", "reason": "missing_named_view"})
        self.assertIsNone(response.decode_view(resp))


class DecodeBulkTestCase(unittest.TestCase):

    def test_mixed_records(self):
        body = [
            {"id": "x", "rev": "2-b"},
            {"id": "y", "error": "conflict", "reason": "Document update conflict."},
            {"id": "z", "error": "forbidden", "reason": "no"},
        ]
        items = response.decode_bulk(couch_response(201, body))
        self.assertEqual([item.id for item in items], ["x", "y", "z"])
        self.assertTrue(items[0].ok)
        self.assertFalse(items[1].ok)
        self.assertTrue(items[1].conflict)
        self.assertIsInstance(items[1].exception(), exceptions.UpdateConflict)
        self.assertFalse(items[2].conflict)
        self.assertIsInstance(items[2].exception(), exceptions.CouchDBException)
        self.assertIsNone(items[0].exception())

    def test_rejected(self):
        resp = couch_response(400, {"error": "bad_request", "reason": "Missing JSON list of 'docs'"})
        with self.assertRaises(exceptions.BatchRejected) as ctx:
            response.decode_bulk(resp)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, "Missing JSON list of 'docs'")

    def test_unexpected_shape(self):
        self.assertRaises(exceptions.BatchRejected, response.decode_bulk, couch_response(201, {"ok": True}))


class ErrorLookupTestCase(unittest.TestCase):

    def test_known_statuses(self):
        self.assertIsInstance(exceptions.http_error_lookup(404), exceptions.MissingResource)
        self.assertIsInstance(exceptions.http_error_lookup(409, "x"), exceptions.UpdateConflict)
        self.assertEqual(exceptions.http_error_lookup(412).message, "Precondition failed")

    def test_unknown_status(self):
        exc = exceptions.http_error_lookup(418, "teapot")
        self.assertEqual(type(exc), exceptions.HTTPError)
        self.assertEqual((exc.status_code, exc.message), (418, "teapot"))
