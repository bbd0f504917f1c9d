import httpx
import pytest

from src.freight.models.domain import Coordinates
from src.freight.services.geocoding.nominatim_client import NominatimGeocoder
from src.freight.services.geocoding.viacep_client import ViaCepClient

VIACEP_PAYLOAD = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "complemento": "de 612 a 1510 - lado par",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


def _viacep(handler, **kwargs) -> ViaCepClient:
    return ViaCepClient(
        base_url="https://viacep.test",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0.0,
        **kwargs,
    )


def _nominatim(handler, **kwargs) -> NominatimGeocoder:
    return NominatimGeocoder(
        base_url="https://nominatim.test",
        user_agent="FreightEngineTests/1.0",
        transport=httpx.MockTransport(handler),
        backoff_seconds=0.0,
        **kwargs,
    )


@pytest.mark.anyio
async def test_viacep_lookup_parses_address():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=VIACEP_PAYLOAD)

    address = await _viacep(handler).lookup("01310100")

    assert seen == ["/ws/01310100/json/"]
    assert address.street == "Avenida Paulista"
    assert address.neighborhood == "Bela Vista"
    assert address.city == "São Paulo"
    assert address.state == "SP"
    assert address.to_query("Brasil") == "Avenida Paulista, Bela Vista, São Paulo, SP, Brasil"


@pytest.mark.anyio
@pytest.mark.parametrize("flag", [True, "true"])
async def test_viacep_unknown_code_returns_none(flag):
    client = _viacep(lambda request: httpx.Response(200, json={"erro": flag}))

    assert await client.lookup("99999999") is None


@pytest.mark.anyio
async def test_viacep_http_error_returns_none():
    client = _viacep(lambda request: httpx.Response(400, text="Bad Request"))

    assert await client.lookup("00000000") is None


@pytest.mark.anyio
async def test_viacep_invalid_json_returns_none():
    client = _viacep(lambda request: httpx.Response(200, text="<html>oops</html>"))

    assert await client.lookup("01310100") is None


@pytest.mark.anyio
async def test_timeouts_are_retried_then_reported_as_missing():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _viacep(handler, max_retries=2)

    assert await client.lookup("01310100") is None
    assert len(attempts) == 3


@pytest.mark.anyio
async def test_transient_network_error_recovers_on_retry():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=VIACEP_PAYLOAD)

    address = await _viacep(handler, max_retries=1).lookup("01310100")

    assert address is not None
    assert len(attempts) == 2


@pytest.mark.anyio
async def test_nominatim_returns_first_match():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"lat": "-23.5613", "lon": "-46.6565", "display_name": "Avenida Paulista"},
                {"lat": "0", "lon": "0"},
            ],
        )

    result = await _nominatim(handler).geocode("Avenida Paulista, São Paulo, Brasil")

    assert result == Coordinates(latitude=-23.5613, longitude=-46.6565)
    request = seen[0]
    assert request.url.path == "/search"
    assert request.url.params["q"] == "Avenida Paulista, São Paulo, Brasil"
    assert request.url.params["format"] == "json"
    assert request.url.params["limit"] == "1"
    assert request.headers["User-Agent"] == "FreightEngineTests/1.0"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"error": "Unable to geocode"},
        [{"lat": "not-a-number", "lon": "1"}],
        [{"lon": "-46.6"}],
        [{"lat": "nan", "lon": "-46.6"}],
    ],
)
async def test_nominatim_unusable_results_return_none(payload):
    geocoder = _nominatim(lambda request: httpx.Response(200, json=payload))

    assert await geocoder.geocode("Lugar Nenhum") is None


@pytest.mark.anyio
async def test_nominatim_server_error_returns_none():
    geocoder = _nominatim(lambda request: httpx.Response(503), max_retries=0)

    assert await geocoder.geocode("Avenida Paulista") is None


@pytest.mark.anyio
async def test_nominatim_blank_address_makes_no_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    assert await _nominatim(handler).geocode("   ") is None
    assert calls == []
