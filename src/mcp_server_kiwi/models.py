"""
Request and response models for the Tequila search endpoint.

A SearchRequest is built once per tool call from the raw arguments, and the
provider's JSON is projected into Itinerary objects. Nothing here outlives a
single invocation.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import InvalidRequest, MalformedResponse

REQUIRED_FIELDS = ("fly_from", "fly_to", "date_from", "date_to")

# Cabin codes accepted by Tequila: economy, premium economy, business, first
CABIN_CLASSES = ("M", "W", "C", "F")
SORT_KEYS = ("price", "duration", "date", "quality")


def _required_str(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest(f"Missing or invalid {name} parameter")
    return value.strip()


def _optional_str(arguments: Mapping[str, Any], name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidRequest(f"Invalid {name} parameter: expected a string")
    value = value.strip()
    return value or None


def _coerce_int(arguments: Mapping[str, Any], name: str, default: int, minimum: int = 0) -> int:
    """Read a non-negative integer, accepting ints or integer strings."""
    value = arguments.get(name)
    if value is None:
        return default

    if isinstance(value, bool):
        raise InvalidRequest(f"Invalid type for '{name}': expected int, got bool")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidRequest(f"Invalid integer value for '{name}': {value!r}")
    else:
        raise InvalidRequest(
            f"Invalid type for '{name}': expected int or str, got {type(value).__name__}"
        )

    if number < minimum:
        raise InvalidRequest(f"'{name}' must be >= {minimum}")
    return number


def _choice(arguments: Mapping[str, Any], name: str, default: str, choices) -> str:
    value = _optional_str(arguments, name)
    if value is None:
        return default
    if value not in choices:
        raise InvalidRequest(f"Invalid {name} {value!r}; expected one of: {', '.join(choices)}")
    return value


@dataclass(frozen=True)
class SearchRequest:
    """Validated parameters of one plan_trip call."""

    fly_from: str
    fly_to: str
    date_from: str
    date_to: str
    return_from: Optional[str] = None
    return_to: Optional[str] = None
    adults: int = 1
    children: int = 0
    infants: int = 0
    selected_cabins: str = "M"
    curr: str = "EUR"
    max_stopovers: int = 2
    sort: str = "price"
    limit: int = 5

    @classmethod
    def from_arguments(cls, arguments: Optional[Mapping[str, Any]]) -> "SearchRequest":
        """
        Validate tool-call arguments and apply defaults.

        Raises:
            InvalidRequest: If a required field is missing or a value is invalid
        """
        if arguments is None:
            raise InvalidRequest("Missing arguments")

        required = {name: _required_str(arguments, name) for name in REQUIRED_FIELDS}

        return cls(
            return_from=_optional_str(arguments, "return_from"),
            return_to=_optional_str(arguments, "return_to"),
            adults=_coerce_int(arguments, "adults", 1, minimum=1),
            children=_coerce_int(arguments, "children", 0),
            infants=_coerce_int(arguments, "infants", 0),
            selected_cabins=_choice(arguments, "selected_cabins", "M", CABIN_CLASSES),
            curr=_optional_str(arguments, "curr") or "EUR",
            max_stopovers=_coerce_int(arguments, "max_stopovers", 2),
            sort=_choice(arguments, "sort", "price", SORT_KEYS),
            limit=_coerce_int(arguments, "limit", 5, minimum=1),
            **required,
        )

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "fly_from": self.fly_from,
            "fly_to": self.fly_to,
            "date_from": self.date_from,
            "date_to": self.date_to,
            "adults": str(self.adults),
            "children": str(self.children),
            "infants": str(self.infants),
            "selected_cabins": self.selected_cabins,
            "curr": self.curr,
            "max_stopovers": str(self.max_stopovers),
            "sort": self.sort,
            "limit": str(self.limit),
        }
        if self.return_from:
            params["return_from"] = self.return_from
        if self.return_to:
            params["return_to"] = self.return_to
        return params


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


@dataclass(frozen=True)
class RouteLeg:
    city_from: str
    city_to: str
    fly_from: str
    fly_to: str
    airline: str

    @classmethod
    def from_api(cls, leg: Mapping[str, Any]) -> "RouteLeg":
        return cls(
            city_from=leg.get("cityFrom") or "Unknown",
            city_to=leg.get("cityTo") or "Unknown",
            fly_from=leg.get("flyFrom") or "???",
            fly_to=leg.get("flyTo") or "???",
            airline=leg.get("airline") or "Unknown",
        )


@dataclass(frozen=True)
class Itinerary:
    """One flight option as returned by the provider."""

    price: float
    city_from: str
    city_to: str
    fly_from: str
    fly_to: str
    local_departure: Optional[str]
    local_arrival: Optional[str]
    duration_seconds: int
    airlines: List[str] = field(default_factory=list)
    route: List[RouteLeg] = field(default_factory=list)
    first_bag_price: Optional[float] = None
    deep_link: Optional[str] = None

    @property
    def stops(self) -> int:
        return max(len(self.route) - 1, 0)

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "Itinerary":
        if not isinstance(item, Mapping):
            raise MalformedResponse(
                f"Expected itinerary object, got {type(item).__name__}"
            )

        duration = item.get("duration")
        total = duration.get("total") if isinstance(duration, Mapping) else None
        duration_seconds = int(total) if _as_float(total) is not None else 0

        bags = item.get("bags_price")
        first_bag = _as_float(bags.get("1")) if isinstance(bags, Mapping) else None

        route = item.get("route")
        legs = []
        if isinstance(route, list):
            legs = [RouteLeg.from_api(leg) for leg in route if isinstance(leg, Mapping)]

        airlines = item.get("airlines")
        airline_codes = []
        if isinstance(airlines, list):
            airline_codes = [a for a in airlines if isinstance(a, str)]

        return cls(
            price=_as_float(item.get("price")) or 0.0,
            city_from=item.get("cityFrom") or "Unknown",
            city_to=item.get("cityTo") or "Unknown",
            fly_from=item.get("flyFrom") or "???",
            fly_to=item.get("flyTo") or "???",
            local_departure=item.get("local_departure"),
            local_arrival=item.get("local_arrival"),
            duration_seconds=duration_seconds,
            airlines=airline_codes,
            route=legs,
            first_bag_price=first_bag,
            deep_link=item.get("deep_link"),
        )


@dataclass(frozen=True)
class SearchResult:
    """Itineraries in provider order, truncated to the requested limit."""

    itineraries: List[Itinerary]
    currency: str
    total_found: int

    @classmethod
    def from_api(cls, payload: Any, currency: str, limit: int) -> "SearchResult":
        """
        Project a decoded Tequila response.

        Raises:
            MalformedResponse: If the payload has no itinerary list under "data"
        """
        if not isinstance(payload, Mapping):
            raise MalformedResponse("Unexpected API response format: expected a JSON object")

        data = payload.get("data")
        if not isinstance(data, list):
            raise MalformedResponse("Unexpected API response format: missing 'data' list")

        itineraries = [Itinerary.from_api(item) for item in data[:limit]]
        # Tequila echoes the currency it priced in
        return cls(
            itineraries=itineraries,
            currency=payload.get("currency") or currency,
            total_found=len(data),
        )

    def __len__(self) -> int:
        return len(self.itineraries)
