import pytest

from infrastructure.captcha.recaptcha import RecaptchaProvider
from infrastructure.captcha.stub_server import RecaptchaStubServer


@pytest.fixture
def stub_server():
    server = RecaptchaStubServer().start()
    yield server
    server.stop()


@pytest.fixture
def site(stub_server):
    return stub_server.register_site()


@pytest.fixture
async def provider(stub_server, site):
    async with RecaptchaProvider(site.private_key, verify_url=stub_server.verify_url) as p:
        yield p
