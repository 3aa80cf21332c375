# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Outgoing request descriptions.

Nothing in here talks to the network. Authentication is added later by the
credential provider of the `Session` that sends the request.
"""

import collections
import logging
from urllib.parse import quote

from divan import options as view_options
from divan.serializer import DEFAULT_SERIALIZER

__all__ = ['CouchRequest', 'build_request', 'build_json_request', 'build_view_request']

log = logging.getLogger(__name__)

JSON_MIME = "application/json"


class CouchRequest(collections.namedtuple('CouchRequest', ['method', 'url', 'headers', 'body', 'stream'])):
    """Method, relative URL, headers and body of a request, ready to send."""
    __slots__ = ()

    @property
    def path(self):
        return self.url.split('?', 1)[0]

    @property
    def query(self):
        parts = self.url.split('?', 1)
        return parts[1] if len(parts) > 1 else ''


def join_url(path, query=None):
    path = str(path)
    if query:
        return '%s?%s' % (path, query)
    return path


def encode_params(params):
    """Encode a plain mapping of already-textual values, in the given order."""
    return '&'.join(
        '%s=%s' % (name, quote(str(value), safe=''))
        for name, value in params.items()
        if value is not None
    )


def build_request(method, path, query=None, headers=None, body=None, content_type=None, stream=False):
    headers = dict(headers or {})
    if content_type:
        headers['Content-Type'] = content_type
    if isinstance(query, dict):
        query = encode_params(query)
    return CouchRequest(method, join_url(path, query), headers, body, stream)


def build_json_request(method, path, value, query=None, headers=None, serializer=DEFAULT_SERIALIZER):
    """Build a request with a JSON body.

    :raise EncodingError: if `value` cannot be serialized; no request is
                          built in that case
    """
    body = serializer.dumps(value).encode('utf-8')
    return build_request(method, path, query=query, headers=headers, body=body, content_type=JSON_MIME)


def build_view_request(path, options=None, max_url_length=view_options.DEFAULT_MAX_URL_LENGTH,
                       serializer=DEFAULT_SERIALIZER, base_url=''):
    """Build the request for a view or ``_all_docs`` style query.

    This is a ``GET`` unless the ``keys`` option makes the URL longer than
    `max_url_length`; then the keys are posted as ``{"keys": [...]}`` to the
    same path while all other options stay in the query string.

    :param path: path of the view, relative to the server
    :param options: a `ViewOptions` instance, or `None`
    :param base_url: the server URL `path` is relative to; it counts towards
                     `max_url_length`
    """
    path = str(path)
    headers = {"Accept": JSON_MIME}
    if options is None:
        return build_request("GET", path, headers=headers)
    if options.etag:
        headers["If-None-Match"] = options.etag
    encoded = options.encode(max_length=max_url_length, base_length=len(base_url) + len(path))
    if encoded.shape == view_options.POST:
        log.debug("Posting %d keys to %s, query too long for a URL", len(options["keys"]), path)
        return build_json_request("POST", path, encoded.body, query=encoded.query,
                                  headers=headers, serializer=serializer)
    return build_request("GET", path, query=encoded.query, headers=headers)
