# -*- coding: utf-8 -*-
"""
gait 包：腿部目标控制器 + 蜘蛛身体的步态/重定目标策略。
"""

from .config import LegSpawnInfo, SpiderConfig  # noqa: F401
from .legs import AnimatedLeg, BasicLeg, LegController, step_target  # noqa: F401
from .spider import Spider, SpiderLeg, TickReport, spawn_spider  # noqa: F401
