from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from hawk.core.config import settings
from hawk.core.errors import PayloadShapeError
from hawk.schemas.league import CategoryDefinition, Direction, LeagueInfo, LeagueSummary
from hawk.schemas.team import StandingRecord, TeamRecord
from hawk.services.yahoo.stat_values import parse_stat_value

logger = logging.getLogger(__name__)


# ---------------- Fail-soft boundary ----------------
def fail_soft(*, section: str, default: Callable[[], Any]):
    """
    Decorator for public parsers. Any structural surprise in the payload is logged
    and turned into `default()` so one broken section never takes down the rest.
    """
    def decorator(fn: Callable):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except PayloadShapeError as e:
                logger.warning("Yahoo %s payload skipped: %s", section, e.detail)
            except Exception:
                logger.warning("Yahoo %s payload could not be parsed", section, exc_info=True)
            return default()
        return wrapper
    return decorator


# ---------------- Small utils ----------------
def _get(d: Any, *keys) -> Any:
    cur = d
    for k in keys:
        if isinstance(cur, dict) and k in cur:
            cur = cur[k]
        elif isinstance(cur, list) and isinstance(k, int) and -len(cur) <= k < len(cur):
            cur = cur[k]
        else:
            return None
    return cur


def _as_list(x: Any) -> List:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]


def _maybe_int(v: Any) -> Optional[int]:
    try:
        if v is None:
            return None
        s = str(v).strip()
        return int(s) if s != "" else None
    except (TypeError, ValueError):
        return None


def _maybe_float(v: Any) -> Optional[float]:
    try:
        if v is None:
            return None
        s = str(v).strip()
        return float(s) if s != "" else None
    except (TypeError, ValueError):
        return None


def _fantasy_content(payload: Any) -> dict:
    """Accept the bare Yahoo body or the proxy's {"data": {...}} envelope."""
    if isinstance(payload, dict) and "fantasy_content" not in payload and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    fc = _get(payload, "fantasy_content")
    if not isinstance(fc, dict):
        raise PayloadShapeError("fantasy_content", "missing or not an object")
    return fc


def _slot0(node: Any) -> Any:
    """Yahoo wraps single children as ["x"] or {"0": x}; return x (or node itself)."""
    if isinstance(node, list):
        return node[0] if node else None
    if isinstance(node, dict) and "0" in node:
        return node["0"]
    return node


def _league_parts(fc: dict, section: str) -> tuple[dict, Any]:
    """
    league is usually a list: [ {meta...}, {<section>: ...} ].
    Returns (meta, section_node).
    """
    league_node = fc.get("league")
    if not isinstance(league_node, list) or not league_node:
        raise PayloadShapeError(section, "league is not a non-empty array")
    meta = league_node[0] if isinstance(league_node[0], dict) else {}
    for part in league_node[1:]:
        if isinstance(part, dict) and section in part:
            return meta, part[section]
    raise PayloadShapeError(section, f"league has no '{section}' slot")


# ---------------- Indexed pseudo-arrays ----------------
def _count(node: dict) -> int:
    n = _maybe_int(node.get("count"))
    if n is None:
        logger.debug("Indexed node without usable count: keys=%s", list(node.keys())[:8])
        return 0
    return max(n, 0)


def iter_indexed(node: Any) -> Iterator[Any]:
    """
    Iterate Yahoo's {"count": N, "0": {...}, "1": {...}} pseudo-arrays by the
    explicit count (key presence/order is not trusted). Missing slots are skipped.
    Real JSON arrays are iterated as-is.
    """
    if isinstance(node, list):
        yield from node
        return
    if not isinstance(node, dict):
        return
    n = _count(node)
    if n > len(node):
        # count can't be trusted to bound the walk; visit only the slots present
        slots = sorted({int(k) for k in node if isinstance(k, int) or (isinstance(k, str) and k.isdigit())})
        indices: Iterable[int] = [i for i in slots if i < n]
    else:
        indices = range(n)
    for i in indices:
        if str(i) in node:
            yield node[str(i)]
        elif i in node:
            yield node[i]


def merge_properties(entity: Any) -> Optional[dict]:
    """
    An entity (team, league, player) arrives as:
        [ [ {"team_key": ...}, {"team_id": ...}, [], {"name": ...} ], {"team_stats": ...}, ... ]
    Union the single-key dicts of the first slot. Last write wins on collisions.
    """
    if not isinstance(entity, list) or not entity or not isinstance(entity[0], list):
        return None
    agg: dict = {}
    for part in entity[0]:
        if isinstance(part, dict):
            agg.update(part)
    return agg


def find_slot(entity: Any, key: str) -> Any:
    """Find the later-slot substructure holding `key` (team_stats, team_points, team_standings)."""
    if not isinstance(entity, list):
        return None
    for part in entity[1:]:
        if isinstance(part, dict) and key in part:
            return part[key]
    return None


def _normalize_team_name(team_obj: dict) -> Optional[str]:
    nm = team_obj.get("name")
    if isinstance(nm, str):
        return nm
    if isinstance(nm, dict):
        full = nm.get("full")
        if isinstance(full, str):
            return full
    return None


# ---------------- Stats ----------------
def parse_stats_block(team_stats: Any) -> Dict[str, float]:
    """
    team_stats = {"coverage_type": "week", "week": "3", "stats": [ {"stat": {"stat_id": "12", "value": "512"}}, ... ]}
    stats may also come index-keyed. At most one entry per stat_id (last wins).
    """
    out: Dict[str, float] = {}
    if not isinstance(team_stats, dict):
        return out
    for item in iter_indexed(team_stats.get("stats")):
        st = item.get("stat") if isinstance(item, dict) else None
        if not isinstance(st, dict):
            continue
        sid = st.get("stat_id")
        if sid is None:
            continue
        out[str(sid)] = parse_stat_value(st.get("value"))
    return out


def parse_team_record(team_array: Any, week: Optional[int] = None) -> Optional[TeamRecord]:
    """One team entity -> TeamRecord, or None when key/name/stats are missing."""
    props = merge_properties(team_array)
    if not props:
        return None
    team_key = props.get("team_key")
    name = _normalize_team_name(props)
    team_stats = find_slot(team_array, "team_stats")
    if not team_key or not name or not isinstance(team_stats, dict):
        return None
    if week is None:
        week = _maybe_int(team_stats.get("week"))
    return TeamRecord(
        team_key=str(team_key),
        team_name=str(name),
        stats=parse_stats_block(team_stats),
        week=week,
    )


# ---------------- League settings ----------------
def _direction_for(stat: dict, lower_abbrs: Iterable[str], lower_keywords: Iterable[str]) -> Direction:
    abbrs = {a.upper() for a in lower_abbrs}
    tags = {str(stat.get(k) or "").strip().upper() for k in ("abbr", "display_name")}
    if abbrs & (tags - {""}):
        return Direction.LOWER
    name = str(stat.get("name") or "").lower()
    if any(kw and kw in name for kw in lower_keywords):
        return Direction.LOWER
    return Direction.HIGHER


def _parse_category(stat: Any, lower_abbrs: Sequence[str], lower_keywords: Sequence[str]) -> Optional[CategoryDefinition]:
    if not isinstance(stat, dict) or stat.get("stat_id") is None:
        return None
    return CategoryDefinition(
        stat_id=str(stat["stat_id"]),
        name=str(stat.get("name") or ""),
        display_name=stat.get("display_name") or None,
        abbr=stat.get("abbr") or None,
        is_only_display_stat=str(stat.get("is_only_display_stat") or "0") == "1",
        direction=_direction_for(stat, lower_abbrs, lower_keywords),
    )


@fail_soft(section="settings", default=lambda: None)
def parse_league_settings(
    payload: Any,
    lower_is_better_abbrs: Optional[Sequence[str]] = None,
    lower_is_better_keywords: Optional[Sequence[str]] = None,
) -> Optional[LeagueInfo]:
    """
    /league/{key}/settings -> LeagueInfo.
    league = [ {league_key, name, season, current_week, ...}, {"settings": [ {"stat_categories": {"stats": [...]}} ]} ]
    """
    lower_abbrs = settings.LOWER_IS_BETTER_ABBRS if lower_is_better_abbrs is None else list(lower_is_better_abbrs)
    lower_kw = (
        settings.LOWER_IS_BETTER_NAME_KEYWORDS if lower_is_better_keywords is None
        else [k.lower() for k in lower_is_better_keywords]
    )

    fc = _fantasy_content(payload)
    meta, settings_node = _league_parts(fc, "settings")
    settings_obj = _slot0(settings_node)
    if not isinstance(settings_obj, dict):
        raise PayloadShapeError("settings", "settings[0] is not an object")

    league_key = meta.get("league_key") or meta.get("league_id")
    if not league_key:
        raise PayloadShapeError("settings", "league meta has no league_key")

    cats: List[CategoryDefinition] = []
    seen: set[str] = set()
    for item in iter_indexed(_get(settings_obj, "stat_categories", "stats")):
        stat = item.get("stat") if isinstance(item, dict) else None
        cat = _parse_category(stat, lower_abbrs, lower_kw)
        if cat is None:
            continue
        if cat.stat_id in seen:
            logger.debug("Duplicate stat_id %s in league %s settings", cat.stat_id, league_key)
            continue
        seen.add(cat.stat_id)
        cats.append(cat)

    return LeagueInfo(
        league_key=str(league_key),
        name=str(meta.get("name") or ""),
        categories=cats,
        season=str(meta["season"]) if meta.get("season") is not None else None,
        scoring_type=meta.get("scoring_type") or None,
        current_week=_maybe_int(meta.get("current_week")),
        num_teams=_maybe_int(meta.get("num_teams")),
    )


# ---------------- Standings ----------------
def _format_streak(streak: Any) -> Optional[str]:
    # {"type": "win", "value": "3"} -> "W3"
    if isinstance(streak, dict):
        kind = str(streak.get("type") or "").strip()
        value = _maybe_int(streak.get("value"))
        if not kind or not value:
            return None
        return f"{kind[0].upper()}{value}"
    if isinstance(streak, str) and streak.strip():
        return streak.strip()
    return None


def _standings_teams(payload: Any) -> Any:
    fc = _fantasy_content(payload)
    _, standings_node = _league_parts(fc, "standings")
    teams = _get(_slot0(standings_node), "teams")
    if not isinstance(teams, dict):
        raise PayloadShapeError("standings", "standings[0].teams is not an object")
    return teams


@fail_soft(section="standings", default=list)
def parse_standings(payload: Any) -> List[StandingRecord]:
    """W-L-T table from /league/{key}/standings, in Yahoo's listed order."""
    out: List[StandingRecord] = []
    for entry in iter_indexed(_standings_teams(payload)):
        team_array = entry.get("team") if isinstance(entry, dict) else None
        props = merge_properties(team_array)
        if not props or not props.get("team_key"):
            continue
        name = _normalize_team_name(props)
        if not name:
            continue

        st = find_slot(team_array, "team_standings")
        if not isinstance(st, dict):
            st = {}
        ot = st.get("outcome_totals")
        if not isinstance(ot, dict):
            ot = {}
        wins = _maybe_int(ot.get("wins")) or 0
        losses = _maybe_int(ot.get("losses")) or 0
        ties = _maybe_int(ot.get("ties")) or 0
        pct = _maybe_float(ot.get("percentage"))  # Yahoo may return ""

        # Keep percentage=None until games exist; otherwise compute from W-L-T
        if pct is None:
            games = wins + losses + ties
            pct = ((wins + 0.5 * ties) / games) if games > 0 else None

        points = _maybe_float(st.get("points_for"))
        if points is None:
            points = _maybe_float(_get(find_slot(team_array, "team_points") or {}, "total"))

        out.append(StandingRecord(
            team_key=str(props["team_key"]),
            team_id=str(props["team_id"]) if props.get("team_id") is not None else None,
            name=name,
            rank=_maybe_int(st.get("rank")),
            wins=wins,
            losses=losses,
            ties=ties,
            percentage=pct,
            points_for=points,
            points_back=str(st["points_back"]) if st.get("points_back") not in (None, "") else None,
            streak=_format_streak(st.get("streak")),
        ))
    return out


@fail_soft(section="standings", default=list)
def parse_season_team_records(payload: Any) -> List[TeamRecord]:
    """Season-total TeamRecords (week=None) from the standings payload's team_stats slots."""
    out: List[TeamRecord] = []
    for entry in iter_indexed(_standings_teams(payload)):
        team_array = entry.get("team") if isinstance(entry, dict) else None
        rec = parse_team_record(team_array)
        if rec is None:
            continue
        # season totals are reported with coverage_type=season; drop any week tag
        out.append(rec.model_copy(update={"week": None}) if rec.week is not None else rec)
    return out


# ---------------- Scoreboard ----------------
@fail_soft(section="scoreboard", default=list)
def parse_scoreboard_team_records(payload: Any, week: Optional[int] = None) -> List[TeamRecord]:
    """
    /league/{key}/scoreboard;week=W -> one TeamRecord per team that played.
    scoreboard = {"0": {"matchups": {"count": N, "0": {"matchup": {"0": {"teams": {...}}, "week": "3"}}}}, "week": "3"}
    """
    fc = _fantasy_content(payload)
    _, sb = _league_parts(fc, "scoreboard")
    if not isinstance(sb, dict):
        raise PayloadShapeError("scoreboard", "scoreboard is not an object")

    if week is None:
        week = _maybe_int(sb.get("week"))

    matchups = sb.get("matchups")
    if matchups is None:
        matchups = _get(_slot0(sb), "matchups")
    if not isinstance(matchups, (dict, list)):
        raise PayloadShapeError("scoreboard", "no matchups node")

    out: List[TeamRecord] = []
    seen: set[str] = set()
    for entry in iter_indexed(matchups):
        m = entry.get("matchup") if isinstance(entry, dict) else None
        if isinstance(m, list):
            m_agg: dict = {}
            for part in m:
                if isinstance(part, dict):
                    m_agg.update(part)
            m = m_agg
        if not isinstance(m, dict):
            continue
        m_week = week if week is not None else _maybe_int(m.get("week"))
        teams = m.get("teams")
        if teams is None:
            teams = _get(_slot0(m), "teams")
        for t_entry in iter_indexed(teams):
            team_array = t_entry.get("team") if isinstance(t_entry, dict) else None
            rec = parse_team_record(team_array, week=m_week)
            if rec is None:
                continue
            if rec.team_key in seen:
                logger.debug("Team %s listed twice in week %s scoreboard", rec.team_key, m_week)
                continue
            seen.add(rec.team_key)
            out.append(rec)
    return out


def parse_weekly_scoreboards(weekly_data: Any) -> List[TeamRecord]:
    """
    The proxy bundles rolling windows as [ {"week": 5, "data": <scoreboard>}, ... ].
    Flattens to TeamRecords ordered by week (then listing order).
    """
    if isinstance(weekly_data, dict):
        weekly_data = weekly_data.get("weeklyData")

    entries = []
    for i, item in enumerate(_as_list(weekly_data)):
        if not isinstance(item, dict):
            logger.warning("Weekly scoreboard entry %s is not an object; skipped", i)
            continue
        entries.append((_maybe_int(item.get("week")), i, item.get("data", item)))

    # unknown weeks keep their listing position after the known ones
    entries.sort(key=lambda e: (e[0] is None, e[0] or 0, e[1]))

    out: List[TeamRecord] = []
    for wk, _, data in entries:
        out.extend(parse_scoreboard_team_records(data, week=wk))
    return out


# ---------------- Leagues ----------------
@fail_soft(section="leagues", default=list)
def parse_leagues(payload: Any) -> List[LeagueSummary]:
    """League picker rows whether Yahoo nests under users→games or at top-level."""
    fc = _fantasy_content(payload)
    out: List[LeagueSummary] = []
    seen: set[str] = set()

    def _league_meta(league_node: Any) -> Optional[dict]:
        if isinstance(league_node, list):
            return league_node[0] if league_node and isinstance(league_node[0], dict) else None
        return league_node if isinstance(league_node, dict) else None

    def _extract_from_leagues(leagues_node: Any):
        for entry in iter_indexed(leagues_node):
            L = _league_meta(entry.get("league") if isinstance(entry, dict) else None)
            if not L:
                continue
            league_key = L.get("league_key") or L.get("league_id")
            name = L.get("name")
            if not league_key or not name or str(league_key) in seen:
                continue
            seen.add(str(league_key))
            out.append(LeagueSummary(
                league_key=str(league_key),
                name=str(name),
                season=str(L.get("season") or ""),
                scoring_type=str(L.get("scoring_type") or ""),
                num_teams=_maybe_int(L.get("num_teams")),
                current_week=_maybe_int(L.get("current_week")),
            ))

    # Top-level
    top = fc.get("leagues")
    if top is not None:
        _extract_from_leagues(top)

    # Nested under users → games
    for user_entry in iter_indexed(fc.get("users")):
        for user_part in _as_list(_get(user_entry, "user")):
            games = _get(user_part, "games")
            if games is None:
                continue
            for g_entry in iter_indexed(games):
                for g in _as_list(_get(g_entry, "game")):
                    if isinstance(g, dict) and "leagues" in g:
                        _extract_from_leagues(g["leagues"])

    return out
