"""
核心模块 - 配置、日志、错误处理、数据库与基础类
"""
