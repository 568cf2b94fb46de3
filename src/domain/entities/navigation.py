from __future__ import annotations

from enum import Enum

BRAND_NAME = "Home Jobs for Women"


class AppRoute(str, Enum):
    HOME = "/"
    POST_JOB = "/post-job"
    AFFILIATES = "/affiliates"
    PROFILE = "/profile"
    LOGIN = "/login"
