"""Consulta por rango con potencia promedio diaria.

Agrupa las lecturas por día UTC, calcula promedio de Voltage y Current y
agrega una entrada sintética "Power" por día. Los días se emiten en orden
cronológico sin depender del orden en que la BD devuelve las filas.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from statistics import mean
from typing import Dict, Iterable, List, Optional

from ..core.domain.errors import InvalidRange, MissingRangeParameter
from ..core.domain.reading import CURRENT, POWER, VOLTAGE, StoredReading, format_utc
from ..infrastructure.persistence.readings_storage import ReadingStorage
from ..schemas import ReadingOut

logger = logging.getLogger(__name__)


def parse_range_bound(value: Optional[str], parameter: str, *, round_up: bool = False) -> int:
    """Convierte un límite del rango (ISO-8601) a segundos Unix.

    Fechas sin zona horaria se interpretan como UTC. ``round_up`` redondea
    hacia arriba (límite inferior) para que ambos límites sigan siendo
    inclusivos con timestamps enteros.
    """
    if value is None or not value.strip():
        raise MissingRangeParameter()

    raw = value.strip()
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00").replace("z", "+00:00"))
    except ValueError:
        raise InvalidRange(parameter, raw) from None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    seconds = dt.timestamp()
    return math.ceil(seconds) if round_up else math.floor(seconds)


def _average(values: List[float]) -> float:
    return mean(values) if values else 0.0


def aggregate_daily_power(readings: Iterable[StoredReading]) -> List[ReadingOut]:
    """Lecturas crudas + una entrada Power por día UTC.

    Power = promedio(Voltage) * promedio(Current); un promedio sin valores
    vale 0. Sin lecturas devuelve lista vacía.
    """
    by_day: Dict[str, List[StoredReading]] = defaultdict(list)
    for reading in readings:
        try:
            day = reading.day_key
        except (OverflowError, OSError, ValueError):
            logger.warning(
                "[Query] Skipping reading with unrepresentable timestamp=%s name=%s",
                reading.timestamp,
                reading.metric_name,
            )
            continue
        by_day[day].append(reading)

    response: List[ReadingOut] = []
    for day in sorted(by_day):
        # sorted() es estable: empates conservan el orden de la BD
        day_readings = sorted(by_day[day], key=lambda r: r.timestamp)

        voltages = [r.metric_value for r in day_readings if r.metric_name == VOLTAGE]
        currents = [r.metric_value for r in day_readings if r.metric_name == CURRENT]
        avg_power = _average(voltages) * _average(currents)

        for reading in day_readings:
            response.append(
                ReadingOut(
                    time=format_utc(reading.time),
                    name=reading.metric_name,
                    value=reading.metric_value,
                )
            )

        response.append(ReadingOut(time=f"{day}T00:00:00.000Z", name=POWER, value=avg_power))

    return response


def query_daily_power(
    storage: ReadingStorage,
    from_value: Optional[str],
    to_value: Optional[str],
) -> List[ReadingOut]:
    if not from_value or not to_value:
        raise MissingRangeParameter()

    from_ts = parse_range_bound(from_value, "from", round_up=True)
    to_ts = parse_range_bound(to_value, "to")

    if from_ts > to_ts:
        logger.debug("[Query] Empty range from=%s to=%s", from_ts, to_ts)
        return []

    readings = storage.query_readings(from_ts, to_ts)
    logger.debug("[Query] from=%s to=%s readings=%d", from_ts, to_ts, len(readings))

    if not readings:
        return []

    return aggregate_daily_power(readings)
