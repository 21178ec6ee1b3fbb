"""Strava REST API client.

Every public method maps its arguments onto one endpoint: a relative path, a
query mapping and an HTTP verb. Optional arguments left as ``None`` are not
sent, so Strava applies its own defaults. The access token is appended to
every query.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..auth import mask_token, resolve_access_token
from ..errors import ServiceError
from ..models import ResponseEnvelope, Verbosity
from .response_handling import is_success_status, shape_response
from .transport import FileSource

LOGGER = logging.getLogger(__name__)

ResourceId = Union[int, str]
StreamTypes = Union[str, Sequence[str]]

__all__ = ["APIClient"]


class APIClient:
    """Typed wrapper around the Strava v3 REST endpoints.

    Args:
        token: Access token string, or an object exposing ``get_token()``.
            Resolved once here.
        transport: Object with ``request(method, path, *, query=None,
            files=None)``, usually an :class:`HTTPTransport`.
        verbosity: ``Verbosity.BASIC`` returns decoded bodies,
            ``Verbosity.ENHANCED`` returns :class:`ResponseEnvelope` objects.
    """

    def __init__(
        self,
        token: Any,
        transport: Any,
        verbosity: Verbosity | int | str = Verbosity.BASIC,
    ) -> None:
        if transport is None:
            raise ValueError("APIClient requires an HTTP transport")
        self._token = resolve_access_token(token)
        self._transport = transport
        self._verbosity = Verbosity.coerce(verbosity)

    @property
    def verbosity(self) -> Verbosity:
        return self._verbosity

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------
    def _query(self, **params: Any) -> Dict[str, Any]:
        query = {key: value for key, value in params.items() if value is not None}
        query["access_token"] = self._token
        return query

    def _get_response(
        self,
        method: str,
        path: str,
        parameters: Mapping[str, Any],
        *,
        raw_text: bool = False,
    ) -> Any:
        """Issue one request and apply the verbosity policy to its result."""

        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                "%s %s params=%s", method, path, self._loggable(parameters["query"])
            )
        try:
            response = self._transport.request(method, path, **parameters)
            if (
                raw_text
                and not isinstance(response, str)
                and is_success_status(response.status_code)
            ):
                response = response.text
            result = shape_response(response)
        except Exception as exc:
            LOGGER.warning("%s %s failed: %s", method, path, exc)
            raise ServiceError.wrap(exc) from exc

        if isinstance(result, ResponseEnvelope) and self._verbosity is Verbosity.BASIC:
            return result.body
        return result

    @staticmethod
    def _loggable(query: Mapping[str, Any]) -> Dict[str, Any]:
        safe = dict(query)
        if "access_token" in safe:
            safe["access_token"] = mask_token(str(safe["access_token"]))
        return safe

    # ------------------------------------------------------------------
    # Athletes
    # ------------------------------------------------------------------
    def get_athlete(self, id: Optional[ResourceId] = None) -> Any:
        """Authenticated athlete, or the athlete with ``id``."""

        path = "athlete" if id is None else f"athletes/{id}"
        return self._get_response("GET", path, {"query": self._query()})

    def get_athlete_stats(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"athletes/{id}/stats", {"query": self._query()}
        )

    def get_athlete_routes(
        self,
        id: ResourceId,
        type: Optional[str] = None,
        after: Optional[int] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(type=type, after=after, page=page, per_page=per_page)
        return self._get_response("GET", f"athletes/{id}/routes", {"query": query})

    def get_athlete_clubs(self) -> Any:
        return self._get_response("GET", "athlete/clubs", {"query": self._query()})

    def get_athlete_activities(
        self,
        before: Optional[Union[int, str]] = None,
        after: Optional[Union[int, str]] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        """Activities of the authenticated athlete.

        ``before`` and ``after`` are epoch timestamps.
        """
        query = self._query(before=before, after=after, page=page, per_page=per_page)
        return self._get_response("GET", "athlete/activities", {"query": query})

    def get_athlete_friends(
        self,
        id: Optional[ResourceId] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        path = "athlete/friends" if id is None else f"athletes/{id}/friends"
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", path, {"query": query})

    def get_athlete_followers(
        self,
        id: Optional[ResourceId] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        path = "athlete/followers" if id is None else f"athletes/{id}/followers"
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", path, {"query": query})

    def get_athlete_both_following(
        self,
        id: ResourceId,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        """Athletes both followed by the authenticated athlete and ``id``."""

        query = self._query(page=page, per_page=per_page)
        return self._get_response(
            "GET", f"athletes/{id}/both-following", {"query": query}
        )

    def get_athlete_koms(
        self,
        id: ResourceId,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", f"athletes/{id}/koms", {"query": query})

    def get_athlete_zones(self) -> Any:
        return self._get_response("GET", "athlete/zones", {"query": self._query()})

    def get_athlete_starred_segments(
        self,
        id: Optional[ResourceId] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        # The by-id path differs from Strava's published docs; this is the one
        # the API actually serves.
        path = "segments/starred" if id is None else f"athletes/{id}/segments/starred"
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", path, {"query": query})

    def update_athlete(
        self,
        city: str,
        state: str,
        country: str,
        sex: str,
        weight: float,
    ) -> Any:
        query = self._query(
            city=city, state=state, country=country, sex=sex, weight=weight
        )
        return self._get_response("PUT", "athlete", {"query": query})

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------
    def get_activity(
        self, id: ResourceId, include_all_efforts: Optional[bool] = None
    ) -> Any:
        query = self._query(include_all_efforts=include_all_efforts)
        return self._get_response("GET", f"activities/{id}", {"query": query})

    def get_activity_comments(
        self,
        id: ResourceId,
        markdown: Optional[bool] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(markdown=markdown, page=page, per_page=per_page)
        return self._get_response(
            "GET", f"activities/{id}/comments", {"query": query}
        )

    def get_activity_kudos(
        self,
        id: ResourceId,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", f"activities/{id}/kudos", {"query": query})

    def get_activity_photos(
        self, id: ResourceId, size: int = 2048, photo_sources: str = "true"
    ) -> Any:
        query = self._query(size=size, photo_sources=photo_sources)
        return self._get_response("GET", f"activities/{id}/photos", {"query": query})

    def get_activity_zones(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"activities/{id}/zones", {"query": self._query()}
        )

    def get_activity_laps(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"activities/{id}/laps", {"query": self._query()}
        )

    def get_activity_upload_status(self, id: ResourceId) -> Any:
        return self._get_response("GET", f"uploads/{id}", {"query": self._query()})

    def create_activity(
        self,
        name: str,
        type: str,
        start_date_local: str,
        elapsed_time: int,
        description: Optional[str] = None,
        distance: Optional[float] = None,
        private: Optional[int] = None,
        trainer: Optional[int] = None,
    ) -> Any:
        """Create a manual activity."""

        query = self._query(
            name=name,
            type=type,
            start_date_local=start_date_local,
            elapsed_time=elapsed_time,
            description=description,
            distance=distance,
            private=private,
            trainer=trainer,
        )
        return self._get_response("POST", "activities", {"query": query})

    def upload_activity(
        self,
        file: FileSource,
        activity_type: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        private: Optional[int] = None,
        trainer: Optional[int] = None,
        commute: Optional[int] = None,
        data_type: Optional[str] = None,
        external_id: Optional[str] = None,
    ) -> Any:
        """Upload a FIT/TCX/GPX file as a multipart ``file`` part.

        ``file`` is a path or an open binary file object. The returned upload
        id can be polled with :meth:`get_activity_upload_status`.
        """
        query = self._query(
            activity_type=activity_type,
            name=name,
            description=description,
            private=private,
            trainer=trainer,
            commute=commute,
            data_type=data_type,
            external_id=external_id,
        )
        return self._get_response(
            "POST", "uploads", {"query": query, "files": {"file": file}}
        )

    def update_activity(
        self,
        id: ResourceId,
        name: Optional[str] = None,
        type: Optional[str] = None,
        private: Optional[bool] = None,
        commute: Optional[bool] = None,
        trainer: Optional[bool] = None,
        gear_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Any:
        query = self._query(
            name=name,
            type=type,
            private=private,
            commute=commute,
            trainer=trainer,
            gear_id=gear_id,
            description=description,
        )
        return self._get_response("PUT", f"activities/{id}", {"query": query})

    def delete_activity(self, id: ResourceId) -> Any:
        return self._get_response(
            "DELETE", f"activities/{id}", {"query": self._query()}
        )

    # ------------------------------------------------------------------
    # Gear and clubs
    # ------------------------------------------------------------------
    def get_gear(self, id: ResourceId) -> Any:
        return self._get_response("GET", f"gear/{id}", {"query": self._query()})

    def get_club(self, id: ResourceId) -> Any:
        return self._get_response("GET", f"clubs/{id}", {"query": self._query()})

    def get_club_members(
        self,
        id: ResourceId,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", f"clubs/{id}/members", {"query": query})

    def get_club_activities(
        self,
        id: ResourceId,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(page=page, per_page=per_page)
        return self._get_response("GET", f"clubs/{id}/activities", {"query": query})

    def get_club_announcements(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"clubs/{id}/announcements", {"query": self._query()}
        )

    def get_club_group_events(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"clubs/{id}/group_events", {"query": self._query()}
        )

    def join_club(self, id: ResourceId) -> Any:
        return self._get_response("POST", f"clubs/{id}/join", {"query": self._query()})

    def leave_club(self, id: ResourceId) -> Any:
        return self._get_response(
            "POST", f"clubs/{id}/leave", {"query": self._query()}
        )

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------
    def get_route(self, id: ResourceId) -> Any:
        return self._get_response("GET", f"routes/{id}", {"query": self._query()})

    def get_route_as_gpx(self, id: ResourceId) -> Any:
        """GPX document for the route, as text."""

        return self._get_response(
            "GET", f"routes/{id}/export_gpx", {"query": self._query()}, raw_text=True
        )

    def get_route_as_tcx(self, id: ResourceId) -> Any:
        """TCX document for the route, as text."""

        return self._get_response(
            "GET", f"routes/{id}/export_tcx", {"query": self._query()}, raw_text=True
        )

    # ------------------------------------------------------------------
    # Segments
    # ------------------------------------------------------------------
    def get_segment(self, id: ResourceId) -> Any:
        return self._get_response("GET", f"segments/{id}", {"query": self._query()})

    def get_segment_leaderboard(
        self,
        id: ResourceId,
        gender: Optional[str] = None,
        age_group: Optional[str] = None,
        weight_class: Optional[str] = None,
        following: Optional[bool] = None,
        club_id: Optional[ResourceId] = None,
        date_range: Optional[str] = None,
        context_entries: Optional[int] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(
            gender=gender,
            age_group=age_group,
            weight_class=weight_class,
            following=following,
            club_id=club_id,
            date_range=date_range,
            context_entries=context_entries,
            page=page,
            per_page=per_page,
        )
        return self._get_response(
            "GET", f"segments/{id}/leaderboard", {"query": query}
        )

    def get_segment_explorer(
        self,
        bounds: str,
        activity_type: str = "riding",
        min_cat: Optional[int] = None,
        max_cat: Optional[int] = None,
    ) -> Any:
        """Popular segments within ``bounds`` (``"sw_lat,sw_lng,ne_lat,ne_lng"``)."""

        query = self._query(
            bounds=bounds, activity_type=activity_type, min_cat=min_cat, max_cat=max_cat
        )
        return self._get_response("GET", "segments/explore", {"query": query})

    def get_segment_efforts(
        self,
        id: ResourceId,
        athlete_id: Optional[ResourceId] = None,
        start_date_local: Optional[str] = None,
        end_date_local: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Any:
        query = self._query(
            athlete_id=athlete_id,
            start_date_local=start_date_local,
            end_date_local=end_date_local,
            page=page,
            per_page=per_page,
        )
        return self._get_response(
            "GET", f"segments/{id}/all_efforts", {"query": query}
        )

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------
    def get_streams_activity(
        self,
        id: ResourceId,
        types: StreamTypes,
        resolution: Optional[str] = None,
        series_type: str = "distance",
    ) -> Any:
        return self._get_streams(
            f"activities/{id}/streams", types, resolution, series_type
        )

    def get_streams_effort(
        self,
        id: ResourceId,
        types: StreamTypes,
        resolution: Optional[str] = None,
        series_type: str = "distance",
    ) -> Any:
        return self._get_streams(
            f"segment_efforts/{id}/streams", types, resolution, series_type
        )

    def get_streams_segment(
        self,
        id: ResourceId,
        types: StreamTypes,
        resolution: Optional[str] = None,
        series_type: str = "distance",
    ) -> Any:
        return self._get_streams(
            f"segments/{id}/streams", types, resolution, series_type
        )

    def get_streams_route(self, id: ResourceId) -> Any:
        return self._get_response(
            "GET", f"routes/{id}/streams", {"query": self._query()}
        )

    def _get_streams(
        self,
        base_path: str,
        types: StreamTypes,
        resolution: Optional[str],
        series_type: str,
    ) -> Any:
        if not isinstance(types, str):
            types = ",".join(types)
        query = self._query(resolution=resolution, series_type=series_type)
        return self._get_response("GET", f"{base_path}/{types}", {"query": query})
