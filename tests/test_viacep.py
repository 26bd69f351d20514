import pytest
from urllib.error import URLError

from cep_weather.adapters.geocoding import ViaCepGeocodingAdapter
from cep_weather.domain.errors import LocationNotFoundError, UpstreamUnavailableError

from .conftest import SAO_PAULO, VIACEP_URL


@pytest.fixture
def adapter() -> ViaCepGeocodingAdapter:
    return ViaCepGeocodingAdapter(timeout_seconds=1)


def test_lookup_url(adapter: ViaCepGeocodingAdapter) -> None:
    assert adapter.lookup_url("01001000") == "https://viacep.com.br/ws/01001000/json/"


def test_resolve_returns_city(upstreams, adapter: ViaCepGeocodingAdapter) -> None:
    upstreams.add(VIACEP_URL, payload=SAO_PAULO)

    location = adapter.resolve("01001000")

    assert location.city_name == "São Paulo"
    assert upstreams.calls == ["https://viacep.com.br/ws/01001000/json/"]


@pytest.mark.parametrize("flag", [True, "true", "1"])
def test_error_flag_means_not_found(upstreams, adapter: ViaCepGeocodingAdapter, flag) -> None:
    upstreams.add(VIACEP_URL, payload={"erro": flag})

    with pytest.raises(LocationNotFoundError) as exc_info:
        adapter.resolve("99999999")
    assert exc_info.value.stage == "location"


@pytest.mark.parametrize("flag", [False, "false", "0", ""])
def test_falsy_error_flag_is_ignored(upstreams, adapter: ViaCepGeocodingAdapter, flag) -> None:
    upstreams.add(VIACEP_URL, payload={**SAO_PAULO, "erro": flag})

    assert adapter.resolve("01001000").city_name == "São Paulo"


@pytest.mark.parametrize(
    "payload", [{"localidade": ""}, {"localidade": "   "}, {"localidade": None}, {"uf": "SP"}]
)
def test_empty_city_means_not_found(upstreams, adapter: ViaCepGeocodingAdapter, payload) -> None:
    upstreams.add(VIACEP_URL, payload=payload)

    with pytest.raises(LocationNotFoundError):
        adapter.resolve("01001000")


def test_transport_failure(upstreams, adapter: ViaCepGeocodingAdapter) -> None:
    upstreams.add(VIACEP_URL, error=URLError("connection refused"))

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        adapter.resolve("01001000")
    assert exc_info.value.stage == "location"
    assert exc_info.value.public_message == "Failed to get city information"


def test_non_200_status(upstreams, adapter: ViaCepGeocodingAdapter) -> None:
    upstreams.add(VIACEP_URL, status=400, body=b"<html>Bad Request</html>")

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        adapter.resolve("01001000")
    assert exc_info.value.status == 400
    assert exc_info.value.public_message.startswith("Failed to get city information")
    assert "Bad Request" in exc_info.value.body


@pytest.mark.parametrize(
    "body",
    [b"not json", b"[1, 2]", b'{"localidade": 42}', b'{"localidade": "X", "erro": 1}'],
)
def test_malformed_body(upstreams, adapter: ViaCepGeocodingAdapter, body: bytes) -> None:
    upstreams.add(VIACEP_URL, body=body)

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        adapter.resolve("01001000")
    assert exc_info.value.public_message == "Failed to parse city information"


def test_undecodable_body(upstreams, adapter: ViaCepGeocodingAdapter) -> None:
    upstreams.add(VIACEP_URL, body=b"\xff\xfe\xfa")

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        adapter.resolve("01001000")
    assert exc_info.value.public_message == "Failed to read city information response"
