"""
应用常量配置 - 统一管理所有魔法数字和硬编码值
"""


class APIConstants:
    """API相关常量"""
    # HTTP状态码
    HTTP_OK = 200
    HTTP_CREATED = 201
    HTTP_BAD_REQUEST = 400
    HTTP_NOT_FOUND = 404
    HTTP_INTERNAL_ERROR = 500
    HTTP_BAD_GATEWAY = 502
    HTTP_SERVICE_UNAVAILABLE = 503

    # CORS配置
    CORS_MAX_AGE = 86400  # 24小时


class CheckpointConstants:
    """检查点相关常量"""
    LABEL_MAX_LENGTH = 255
    # 谱系回溯的最大深度，防止脏数据形成环
    MAX_LINEAGE_DEPTH = 10000


class CompileConstants:
    """编译相关常量"""
    # 单个文档编译失败时的占位片段
    PLACEHOLDER_FRAGMENT = "<p>[content unavailable]</p>"
    # 文档内容无法加载时的行内错误标记
    LOAD_ERROR_FRAGMENT = "<p>[Error loading chapter content]</p>"
    # 段落之间的分隔（纯文本扁平化）
    PARAGRAPH_BREAK = "\n\n"
    DEFAULT_HEADING_LEVEL = 1
    MAX_HEADING_LEVEL = 6


class WeaveConstants:
    """融合（Weave）相关常量"""
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_MAX_TOKENS = 4096
    DEFAULT_TIMEOUT = 60.0


class CodexConstants:
    """设定集相关常量"""
    NAME_MAX_LENGTH = 255
    COLOR_MAX_LENGTH = 16
    # 未知类型使用的颜色
    DEFAULT_COLOR = "#64748b"


class DatabaseConstants:
    """数据库相关常量"""
    ID_LENGTH = 36
    TITLE_MAX_LENGTH = 255
    FILE_TYPE_MAX_LENGTH = 20


class LoggingConstants:
    """日志相关常量"""
    MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT = 5
    # 单条日志消息的最大长度，草稿正文不应整段写入日志
    MAX_MESSAGE_LENGTH = 2000


class ServerConstants:
    """服务器相关常量"""
    DEFAULT_PORT = 8000
    DEFAULT_HOST = "0.0.0.0"
