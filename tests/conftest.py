from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from amazonian.client import Amazonian
from amazonian.configuration import Configuration
from amazonian.transport import Response

LOOKUP_XML = b"""<?xml version="1.0" ?>
<ItemLookupResponse xmlns="http://webservices.amazon.com/AWSECommerceService/2011-08-01">
  <Items>
    <Request><IsValid>True</IsValid></Request>
    <Item>
      <ASIN>1430218150</ASIN>
      <DetailPageURL>http://www.amazon.com/dp/1430218150</DetailPageURL>
      <ItemAttributes>
        <Title>Learn Objective-C on the Mac (Learn Series)</Title>
      </ItemAttributes>
    </Item>
  </Items>
</ItemLookupResponse>
"""

SEARCH_XML = b"""<?xml version="1.0" ?>
<ItemSearchResponse xmlns="http://webservices.amazon.com/AWSECommerceService/2011-08-01">
  <Items>
    <TotalResults>3</TotalResults>
    <Item><ASIN>B001</ASIN><ItemAttributes><Title>First</Title></ItemAttributes></Item>
    <Item><ASIN>B002</ASIN><ItemAttributes><Title>Second</Title></ItemAttributes></Item>
    <Item><ASIN>B003</ASIN></Item>
  </Items>
</ItemSearchResponse>
"""

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def configuration() -> Configuration:
    return Configuration(key="AK", secret="secret")


@pytest.fixture
def transport() -> MagicMock:
    transport = MagicMock(name="transport")
    transport.get.return_value = Response(status_code=200, body=LOOKUP_XML)
    return transport


@pytest.fixture
def clock() -> MagicMock:
    return MagicMock(name="clock", return_value=FIXED_NOW)


@pytest.fixture
def client(configuration: Configuration, transport: MagicMock, clock: MagicMock) -> Amazonian:
    return Amazonian(configuration, transport=transport, clock=clock)


@pytest.fixture
def lookup_body() -> bytes:
    return LOOKUP_XML


@pytest.fixture
def search_body() -> bytes:
    return SEARCH_XML
