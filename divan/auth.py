# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

"""Credential providers.

Each provider is a `requests.auth.AuthBase`; the `Session` hands it to the
transport, which lets it decorate every outgoing request.
"""

from requests.auth import AuthBase, HTTPBasicAuth

from divan import exceptions

__all__ = ['BasicAuth', 'CookieAuth', 'credentials_for']

SESSION_COOKIE = 'AuthSession'


class BasicAuth(HTTPBasicAuth):
    """Sends the user name and password with every request."""

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.username)


class CookieAuth(AuthBase):
    """Cookie based session authentication against ``_session``.

    `login` must be called once before the provider decorates anything; the
    session token the server hands out is sent as the ``AuthSession`` cookie
    from then on.
    """

    def __init__(self, name, password):
        self.name = name
        self.password = password
        self.token = None

    def __call__(self, request):
        if self.token:
            cookies = [c.strip() for c in request.headers.get('Cookie', '').split(';')]
            cookies = [c for c in cookies if c and not c.startswith(SESSION_COOKIE + '=')]
            cookies.append('%s=%s' % (SESSION_COOKIE, self.token))
            request.headers['Cookie'] = '; '.join(cookies)
        return request

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.name)

    def login(self, session):
        """Ask the server for a session token.

        :param session: the `Session` to log in with
        :raise LoginFailed: if the server refuses the credentials
        """
        try:
            resp = session.post("_session", json={'name': self.name, 'password': self.password})
        except (exceptions.HTTPUnauthorized, exceptions.HTTPForbidden) as exc:
            raise exceptions.LoginFailed("Login failed for %r" % self.name) from exc
        self.token = resp.raw.cookies.get(SESSION_COOKIE)
        if not self.token:
            raise exceptions.LoginFailed("Server did not return a session cookie")
        return resp.json()

    def logout(self, session):
        session.delete("_session")
        self.token = None


def credentials_for(scheme, username, password):
    """Return the credential provider for a configured scheme.

    :param scheme: ``"basic"``, ``"cookie"`` or `None`
    """
    if not username or scheme is None:
        return None
    if scheme == 'basic':
        return BasicAuth(username, password)
    if scheme == 'cookie':
        return CookieAuth(username, password)
    raise ValueError('Unknown authentication scheme %r' % scheme)
