# -*- coding: utf-8 -*-

import unittest

import requests

from divan import auth, exceptions
from divan.client import Server
from divan.config import ClientConfig
from divan.tests.testutil import FakeTransport, fake_server, make_response


def login_response(token="abc123"):
    resp = make_response(200, {"ok": True, "name": "john", "roles": []})
    resp.cookies.set(auth.SESSION_COOKIE, token)
    return resp


class CredentialsTestCase(unittest.TestCase):

    def test_basic(self):
        provider = auth.credentials_for('basic', 'john', 'secret')
        self.assertIsInstance(provider, auth.BasicAuth)
        prepared = requests.Request('GET', 'http://localhost:5984/db').prepare()
        provider(prepared)
        self.assertTrue(prepared.headers['Authorization'].startswith('Basic '))

    def test_anonymous(self):
        self.assertIsNone(auth.credentials_for('basic', None, None))
        self.assertIsNone(auth.credentials_for(None, 'john', 'secret'))

    def test_unknown_scheme(self):
        self.assertRaises(ValueError, auth.credentials_for, 'oauth', 'john', 'secret')

    def test_cookie_before_login(self):
        prepared = requests.Request('GET', 'http://localhost:5984/db').prepare()
        auth.CookieAuth('john', 'secret')(prepared)
        self.assertNotIn('Cookie', prepared.headers)


class CookieAuthTestCase(unittest.TestCase):

    def test_login_decorates_requests(self):
        server, transport = fake_server(login_response())
        server.login('john', 'secret')
        method, url, kwargs = transport.last
        self.assertEqual((method, url), ("POST", "_session"))
        self.assertEqual(kwargs["json"], {"name": "john", "password": "secret"})
        provider = server.session.auth
        self.assertIs(transport.auth, provider)
        prepared = requests.Request('GET', 'http://localhost:5984/db').prepare()
        provider(prepared)
        self.assertEqual(prepared.headers['Cookie'], 'AuthSession=abc123')

    def test_session_cookie_keeps_other_cookies(self):
        provider = auth.CookieAuth("john", "secret")
        provider.token = "new"
        prepared = requests.Request("GET", "http://localhost:5984/db",
                                    cookies={"lang": "en", auth.SESSION_COOKIE: "old"}).prepare()
        provider(prepared)
        self.assertEqual(prepared.headers["Cookie"], "lang=en; AuthSession=new")

    def test_login_failed(self):
        server, transport = fake_server(make_response(401, {"error": "unauthorized"}))
        self.assertRaises(exceptions.LoginFailed, server.login, 'john', 'wrong')
        self.assertIsNone(server.session.auth)

    def test_logout(self):
        server, transport = fake_server(login_response(), make_response(200, {"ok": True}))
        server.login('john', 'secret')
        server.logout()
        self.assertEqual(transport.last[:2], ("DELETE", "_session"))
        self.assertIsNone(server.session.auth)


class ClientConfigTestCase(unittest.TestCase):

    def test_defaults(self):
        config = ClientConfig.from_env({})
        self.assertEqual(config.url, 'http://localhost:5984/')
        self.assertIsNone(config.username)
        self.assertIsNone(config.timeout)
        self.assertEqual(config.max_url_length, 4096)
        self.assertIsNone(config.credentials())

    def test_from_env(self):
        config = ClientConfig.from_env({
            'COUCHDB_URL': 'https://couch.example.com/',
            'COUCHDB_USER': 'admin',
            'COUCHDB_PASSWORD': 'secret',
            'COUCHDB_TIMEOUT': '2.5',
            'COUCHDB_MAX_URL_LENGTH': '1000',
        })
        self.assertEqual(config.timeout, 2.5)
        self.assertEqual(config.max_url_length, 1000)
        self.assertIsInstance(config.credentials(), auth.BasicAuth)

    def test_invalid_url(self):
        self.assertRaises(ValueError, ClientConfig, url='couch.example.com')

    def test_server_from_config(self):
        transport = FakeTransport(make_response(200, {"version": "3.3.2"}))
        config = ClientConfig('http://couch:5984', username='admin', password='secret', timeout=3)
        server = Server.from_config(config, transport=transport)
        self.assertEqual(transport.base_url, 'http://couch:5984/')
        self.assertIsInstance(transport.auth, auth.BasicAuth)
        server.version()
        self.assertEqual(transport.last[2]["timeout"], 3)

    def test_server_from_config_cookie(self):
        transport = FakeTransport(login_response("t0k3n"))
        config = ClientConfig('http://couch:5984/', username='admin', password='secret', auth='cookie')
        server = Server.from_config(config, transport=transport)
        self.assertEqual(server.session.auth.token, "t0k3n")
        self.assertEqual(transport.last[:2], ("POST", "_session"))
