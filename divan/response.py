# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Turning server responses into results or exceptions.

Absent documents and views decode to `None`; per-document bulk failures
decode to error records. Everything else that is not a success raises an
`exceptions.HTTPError`.
"""

from divan import exceptions, views
from divan.document import Document
from divan.serializer import DEFAULT_SERIALIZER

__all__ = ['CouchResponse', 'decode_json', 'decode_document', 'decode_write',
           'decode_accepted', 'decode_view', 'decode_bulk']

_unset = object()


class CouchResponse(object):
    """Status, headers and body of a single response.

    The body is only parsed as JSON when `json` is first called.
    """

    def __init__(self, response, serializer=DEFAULT_SERIALIZER):
        self._response = response
        self._serializer = serializer
        self._json = _unset

    @property
    def raw(self):
        """The underlying `requests.Response`."""
        return self._response

    @property
    def status_code(self):
        return self._response.status_code

    @property
    def reason(self):
        return self._response.reason

    @property
    def headers(self):
        return self._response.headers

    @property
    def text(self):
        return self._response.text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    @property
    def etag(self):
        return self._response.headers.get('ETag')

    def json(self):
        if self._json is _unset:
            self._json = self._serializer.loads(self.text)
        return self._json

    @property
    def description(self):
        """The server's explanation of an error, if any."""
        try:
            data = self.json()
        except exceptions.EncodingError:
            data = None
        if isinstance(data, dict):
            if data.get('reason'):
                return data['reason']
            if data.get('error'):
                return data['error']
        return self.reason

    def close(self):
        self._response.close()

    def __repr__(self):
        return '<%s [%s]>' % (type(self).__name__, self.status_code)


def raise_for_status(response, expected=None):
    """Raise the matching `HTTPError` unless the status is acceptable.

    :param expected: acceptable status codes; any 2xx when omitted
    """
    if expected is None:
        if response.ok:
            return
    elif response.status_code in expected:
        return
    raise exceptions.http_error_lookup(response.status_code, response.description)


def decode_json(response, expected=None):
    raise_for_status(response, expected)
    return response.json()


def decode_document(response, wrapper=Document):
    """Decode a document fetch; `None` when the document does not exist."""
    if response.status_code == 404:
        return None
    data = decode_json(response)
    if wrapper is not None:
        return wrapper(data)
    return data


def decode_write(response):
    """Decode the ``{"ok", "id", "rev"}`` answer to a write.

    :raise HTTPError: for anything but ``201 Created`` or ``202 Accepted``
    """
    return decode_json(response, expected=(201, 202))


def decode_accepted(response):
    return decode_json(response, expected=(202,))


def decode_row(data, wrapper=None):
    doc = data.get("doc")
    if doc is not None and wrapper is not None:
        doc = wrapper(doc)
    return views.Row(data.get("id"), data.get("key"), data.get("value"), doc, data.get("error"))


def decode_view(response, wrapper=None):
    """Decode view rows in server order.

    :param wrapper: callable applied to included documents
    :return: a `ViewResult`, or `None` when the view or database does not
             exist
    """
    if response.status_code == 304:
        return views.ViewResult([], None, None, etag=response.etag, not_modified=True)
    if response.status_code == 404:
        return None
    data = decode_json(response)
    return views.ViewResult(
        [decode_row(r, wrapper) for r in data.get("rows", [])],
        data.get("offset"),
        data.get("total_rows"),
        update_seq=data.get("update_seq"),
        etag=response.etag,
    )


def decode_bulk(response):
    """Decode the per-document results of ``_bulk_docs``.

    :return: a list of `views.BulkItem` in server order
    :raise BatchRejected: if the server did not accept the batch at all
    """
    if not response.ok:
        raise exceptions.BatchRejected(response.status_code, response.description)
    data = response.json()
    if not isinstance(data, list):
        raise exceptions.BatchRejected(response.status_code, "Unexpected bulk response: %r" % (data,))
    return [views.BulkItem.from_json(item) for item in data]
