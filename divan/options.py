# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Canonical encoding of view query options.

>>> options = ViewOptions(startkey='a', endkey='c', limit=10)
>>> options.query_string()
'startkey=%22a%22&endkey=%22c%22&limit=10'

Long ``keys`` lists do not fit in a URL. `ViewOptions.encode` reports this by
returning a ``POST`` shaped `EncodedQuery`, with ``keys`` moved into the body:

>>> encoded = ViewOptions(keys=['x' * 50] * 100, limit=5).encode(max_length=1000)
>>> encoded.shape, encoded.query
('POST', 'limit=5')
"""

import collections
from urllib.parse import quote

from divan.serializer import DEFAULT_SERIALIZER

__all__ = ['ViewOptions', 'EncodedQuery', 'GET', 'POST', 'DEFAULT_MAX_URL_LENGTH']


DEFAULT_MAX_URL_LENGTH = 4096

GET = 'GET'
POST = 'POST'

JSON = 'json'
STRING = 'string'
INT = 'int'
BOOL = 'bool'
TOKEN = 'token'
HEADER = 'header'

# Declared precedence: options are always encoded in this order.
OPTIONS = collections.OrderedDict([
    ('key', JSON),
    ('keys', JSON),
    ('startkey', JSON),
    ('endkey', JSON),
    ('startkey_docid', STRING),
    ('endkey_docid', STRING),
    ('limit', INT),
    ('skip', INT),
    ('group', BOOL),
    ('group_level', INT),
    ('reduce', BOOL),
    ('descending', BOOL),
    ('include_docs', BOOL),
    ('inclusive_end', BOOL),
    ('update_seq', TOKEN),
    ('stale', TOKEN),
    ('etag', HEADER),
])


class EncodedQuery(collections.namedtuple('EncodedQuery', ['shape', 'query', 'body'])):
    """Wire form of a `ViewOptions` value.

    ``shape`` is ``GET`` (everything in ``query``) or ``POST`` (``keys`` in
    ``body``, as ``{"keys": [...]}``, everything else in ``query``).
    """
    __slots__ = ()

    @property
    def oversized(self):
        return self.shape == POST


def _quote(text):
    return quote(text, safe='')


def _check(name, kind, value):
    if kind == INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('%s must be an integer, got %r' % (name, value))
    elif kind == BOOL:
        if not isinstance(value, bool):
            raise TypeError('%s must be a boolean, got %r' % (name, value))
    elif kind in (STRING, HEADER):
        if not isinstance(value, str):
            raise TypeError('%s must be a string, got %r' % (name, value))
    elif kind == TOKEN:
        if not isinstance(value, (str, bool)):
            raise TypeError('%s must be a string or boolean, got %r' % (name, value))


class ViewOptions(object):
    """Immutable set of view query options.

    Only the names in `OPTIONS` are accepted. Options passed as ``None`` are
    treated as not set and are left out of the encoded query.
    """

    def __init__(self, serializer=DEFAULT_SERIALIZER, **options):
        values = {}
        for name, value in options.items():
            if name not in OPTIONS:
                raise TypeError('unknown view option %r' % name)
            if value is None:
                continue
            kind = OPTIONS[name]
            if name == 'keys':
                if isinstance(value, (str, bytes, dict, set, frozenset)):
                    raise TypeError('keys must be an ordered sequence of keys, got %r' % (value,))
                value = tuple(value)
            _check(name, kind, value)
            values[name] = value
        self._values = values
        self._serializer = serializer
        # Fails early on keys the serializer cannot handle.
        self._encoded = collections.OrderedDict(
            (name, self._encode_value(name, values[name]))
            for name in OPTIONS if name in values and OPTIONS[name] != HEADER
        )

    def _encode_value(self, name, value):
        kind = OPTIONS[name]
        if kind == JSON:
            if name == 'keys':
                value = list(value)
            return _quote(self._serializer.dumps(value))
        elif kind == INT:
            return str(value)
        elif kind == BOOL or isinstance(value, bool):
            return 'true' if value else 'false'
        return _quote(value)

    def __getitem__(self, name):
        return self._values[name]

    def __contains__(self, name):
        return name in self._values

    def __iter__(self):
        return (name for name in OPTIONS if name in self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, ViewOptions):
            return NotImplemented
        # Equal only when the wire form is; JSON object key order counts.
        return self._encoded == other._encoded and self.etag == other.etag

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__,
                            ', '.join('%s=%r' % (name, self._values[name]) for name in self))

    def get(self, name, default=None):
        return self._values.get(name, default)

    def keys(self):
        return list(self)

    def items(self):
        return [(name, self._values[name]) for name in self]

    @property
    def etag(self):
        return self._values.get('etag')

    def replace(self, **changes):
        """Return a copy with the given options changed; ``None`` unsets."""
        values = dict(self._values)
        values.update(changes)
        return ViewOptions(serializer=self._serializer, **values)

    def query_string(self, exclude=()):
        return '&'.join(
            '%s=%s' % (name, value)
            for name, value in self._encoded.items()
            if name not in exclude
        )

    def encode(self, max_length=DEFAULT_MAX_URL_LENGTH, base_length=0):
        """Encode for the wire.

        :param max_length: the longest acceptable URL
        :param base_length: length of the URL without its query string
        :return: an `EncodedQuery`; ``POST`` shaped only when ``keys`` is set
                 and the full query would make the URL longer than
                 `max_length`
        :rtype: `EncodedQuery`
        """
        query = self.query_string()
        if 'keys' in self._values and base_length + 1 + len(query) > max_length:
            body = {'keys': list(self._values['keys'])}
            return EncodedQuery(POST, self.query_string(exclude=('keys',)), body)
        return EncodedQuery(GET, query, None)
