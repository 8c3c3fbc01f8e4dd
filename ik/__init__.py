# -*- coding: utf-8 -*-
"""
ik 包：点链模型 + FABRIK 求解 + 膝关节朝向约束。

当前提供：
- IkChain / ChainSegment: 固定段长的点链。
- solve_chain_towards_target: FABRIK 前后向迭代。
- OrientationConstraint: 三点腿链的中间关节约束。
"""

from .chain import ChainSegment, IkChain  # noqa: F401
from .fabrik import SolveResult, solve_chain_towards_target  # noqa: F401
from .orientation import OrientationConstraint, constrain_middle_joint  # noqa: F401
