# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Client settings.

Settings default to the ``COUCHDB_*`` environment variables:

========================== ====================================
``COUCHDB_URL``            server URL
``COUCHDB_USER``           user name
``COUCHDB_PASSWORD``       password
``COUCHDB_AUTH``           ``basic`` (default) or ``cookie``
``COUCHDB_TIMEOUT``        seconds, no timeout when unset
``COUCHDB_MAX_URL_LENGTH`` longest URL before keys are posted
========================== ====================================
"""

import os

from divan import auth
from divan.options import DEFAULT_MAX_URL_LENGTH

__all__ = ['ClientConfig', 'DEFAULT_BASE_URL']


DEFAULT_BASE_URL = os.environ.get('COUCHDB_URL', 'http://localhost:5984/')


class ClientConfig(object):

    def __init__(self, url=DEFAULT_BASE_URL, username=None, password=None, auth='basic',
                 timeout=None, max_url_length=DEFAULT_MAX_URL_LENGTH):
        if not url.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://, got %r' % url)
        if max_url_length <= 0:
            raise ValueError('max_url_length must be positive')
        self.url = url
        self.username = username
        self.password = password
        self.auth = auth
        self.timeout = timeout
        self.max_url_length = max_url_length

    @classmethod
    def from_env(cls, environ=None):
        if environ is None:
            environ = os.environ
        timeout = environ.get('COUCHDB_TIMEOUT')
        return cls(
            url=environ.get('COUCHDB_URL', 'http://localhost:5984/'),
            username=environ.get('COUCHDB_USER'),
            password=environ.get('COUCHDB_PASSWORD'),
            auth=environ.get('COUCHDB_AUTH', 'basic'),
            timeout=float(timeout) if timeout else None,
            max_url_length=int(environ.get('COUCHDB_MAX_URL_LENGTH', DEFAULT_MAX_URL_LENGTH)),
        )

    def credentials(self):
        """The credential provider for these settings, or `None`."""
        return auth.credentials_for(self.auth, self.username, self.password)

    def __repr__(self):
        return '<%s %r user=%r>' % (type(self).__name__, self.url, self.username)
