"""Traffic queries against Prometheus: periods, PromQL builders and line series."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import requests

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_I64_MAX = 2**63 - 1
_I64_MIN = -(2**63)


@dataclass
class Settings:
    """Prometheus connection settings."""

    endpoint: str = ""
    username: str = ""
    password: str = ""


def _div_trunc(a: int, b: int) -> int:
    quotient = abs(a) // b
    return quotient if a >= 0 else -quotient


@dataclass(frozen=True)
class PeriodParams:
    """Time window of a range query and the timestamps it is sampled at."""

    start: int
    end: int
    step: int
    step_word: str
    sequence: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def for_period(cls, period: str, start_ts: int | None = None) -> PeriodParams:
        """Return the window for ``period`` ("7d" or, otherwise, one day)."""
        st = int(time.time()) if start_ts is None else start_ts
        if period == "7d":
            end = _div_trunc(st + 3599, 3600) * 3600
            start = end - 604800
            return cls(
                start=start,
                end=end,
                step=3600,
                step_word="2h",
                sequence=tuple(start + i * 3600 * 2 for i in range(85)),
            )
        end = _div_trunc(st + 599, 600) * 600
        start = end - 86400
        return cls(
            start=start,
            end=end,
            step=600,
            step_word="10m",
            sequence=tuple(start + i * 600 for i in range(145)),
        )


@dataclass
class LineSeries:
    """One line of a chart: the sum and the (milliseconds, value) points."""

    total: int
    values: list[tuple[int, int]]


class PrometheusError(Exception):
    """Raised when Prometheus answers with an error or a malformed body."""


def request_ql(pid: str | None, uid: str | None, step: str) -> str:
    """Return the PromQL counting requests, by project, user or overall."""
    if pid is not None:
        return (
            f'sum by (typ) (increase(req_fn_total{{pid="{pid}",'
            f'typ=~"success|error"}}[{step}]))'
        )
    if uid is not None:
        return (
            f'sum by (typ) (increase(req_fn_total{{uid="{uid}",'
            f'typ=~"success|error"}}[{step}]))'
        )
    return f"sum by (typ) (increase(req_fn_total[{step}]))"


def flow_ql(pid: str | None, uid: str | None, step: str) -> str:
    """Return the PromQL summing transferred bytes, by project, user or overall."""
    if pid is not None:
        return f'sum by (typ) (increase(req_fn_bytes{{pid="{pid}"}}[{step}]))'
    if uid is not None:
        return f'sum by (typ) (increase(req_fn_bytes{{uid="{uid}"}}[{step}]))'
    return f"sum by (typ) (increase(req_fn_bytes[{step}]))"


def projects_traffic_ql(uid: str | None, pids: Iterable[str], step: str) -> str:
    """Return the PromQL counting all requests of the given projects."""
    joined = "|".join(pids)
    if uid is not None:
        return (
            f'sum by (pid) (increase(req_fn_total{{uid="{uid}",typ="all",'
            f'pid=~"{joined}"}}[{step}]))'
        )
    return f'sum by (pid) (increase(req_fn_total{{typ="all",pid=~"{joined}"}}[{step}]))'


def projects_flows_ql(uid: str | None, pids: Iterable[str], step: str) -> str:
    """Return the PromQL summing bytes of the given projects."""
    joined = "|".join(pids)
    if uid is not None:
        return (
            f'sum by (pid,typ) (increase(req_fn_bytes{{uid="{uid}",'
            f'pid=~"{joined}"}}[{step}]))'
        )
    return f'sum by (pid,typ) (increase(req_fn_bytes{{pid=~"{joined}"}}[{step}]))'


def _to_int(text: Any) -> int:
    try:
        number = float(text)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return _I64_MAX if number > 0 else _I64_MIN
    return max(_I64_MIN, min(_I64_MAX, int(number)))


def line_series_from(
    response: Mapping[str, Any], sequence: Iterable[int]
) -> dict[str, LineSeries]:
    """Turn a range-query response into line series sampled at ``sequence``."""
    points = list(sequence)
    by_key: dict[str, dict[int, int]] = {}
    for item in response["data"]["result"]:
        key = "-".join(sorted(f"{k}-{v}" for k, v in item.get("metric", {}).items()))
        by_key[key or "metric"] = {
            int(t): _to_int(v) for t, v in item.get("values", [])
        }

    series: dict[str, LineSeries] = {}
    for key, times in by_key.items():
        # charts want timestamps in milliseconds
        values = [(t * 1000, times.get(t, 0)) for t in points]
        series[key] = LineSeries(total=sum(v for _, v in values), values=values)
    return series


class PrometheusClient:
    """Queries traffic series from a Prometheus server."""

    def __init__(
        self,
        settings: Settings,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def range(self, query: str, start: int, end: int, step: int) -> dict[str, Any]:
        """Run a range query and return the decoded response."""
        url = f"{self.settings.endpoint}/api/v1/query_range"
        params = {"query": query, "start": start, "end": end, "step": step}
        resp = self.session.get(
            url,
            params=params,
            auth=(self.settings.username, self.settings.password),
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            status = f"{resp.status_code} {resp.reason or ''}".rstrip()
            raise PrometheusError(f"Bad response status: {status}, body: {resp.text}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise PrometheusError(f"invalid response: {exc}") from exc
        inner = data.get("data") if isinstance(data, dict) else None
        if not isinstance(inner, dict) or not isinstance(inner.get("result"), list):
            raise PrometheusError("invalid response: missing data.result")
        return data

    def _series(self, period: PeriodParams, query: str) -> dict[str, LineSeries]:
        log.debug(
            "query: %s, start:%s, end:%s, step:%s",
            query,
            period.start,
            period.end,
            period.step,
        )
        res = self.range(query, period.start, period.end, period.step)
        return line_series_from(res, period.sequence)

    def requests_traffic(
        self, pid: str | None, uid: str | None, period: PeriodParams
    ) -> dict[str, LineSeries]:
        """Return request counts over ``period``."""
        return self._series(period, request_ql(pid, uid, period.step_word))

    def flow_traffic(
        self, pid: str | None, uid: str | None, period: PeriodParams
    ) -> dict[str, LineSeries]:
        """Return transferred bytes over ``period``."""
        return self._series(period, flow_ql(pid, uid, period.step_word))

    def projects_traffic(
        self, uid: str | None, pids: Iterable[str], period: PeriodParams
    ) -> dict[str, LineSeries]:
        """Return request counts and bytes of several projects, merged."""
        pid_list = list(pids)
        merged = self._series(period, projects_traffic_ql(uid, pid_list, period.step_word))
        merged.update(
            self._series(period, projects_flows_ql(uid, pid_list, period.step_word))
        )
        return merged