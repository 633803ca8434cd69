"""
融合（Weave）相关模型
"""
from enum import Enum


class MergeStrategy(str, Enum):
    """融合策略"""
    BLEND = "blend"        # 保留 A 的文风，B 在情节冲突上优先
    RESTYLE = "restyle"    # 以 A 的文风重写 B 的事实
    BRIDGE = "bridge"      # A 接 B，必要时插入过渡

    @classmethod
    def _missing_(cls, value):
        # 兼容旧客户端使用的策略名
        legacy = {
            "mix": cls.BLEND,
            "action_b_tone_a": cls.RESTYLE,
            "append": cls.BRIDGE,
        }
        return legacy.get(value)
