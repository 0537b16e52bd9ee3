import os
import json
import logging
from datetime import datetime
from typing import Optional

# 默认日志格式
DETAILED_LOG_FORMAT = '%(asctime)s [%(levelname)s] %(module)s:%(funcName)s:%(lineno)d - %(message)s'

ROOT_LOGGER_NAME = 'pg_api'
MAIN_LOG_NAME = 'app.log'


class JsonFormatter(logging.Formatter):
    """JSON格式的日志格式化器"""
    def format(self, record):
        log_data = {
            'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3],
            'level': record.levelname,
            'logger': record.name,
            'module': record.module,
            'line': record.lineno,
        }

        # 添加其他额外字段
        if hasattr(record, 'extra') and isinstance(record.extra, dict):
            log_data.update({k: self._ensure_serializable(v) for k, v in record.extra.items()})

        log_data['message'] = record.getMessage()

        # 添加异常信息
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)

    def _ensure_serializable(self, obj):
        """确保对象可JSON序列化"""
        if isinstance(obj, dict):
            return {k: self._ensure_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._ensure_serializable(item) for item in obj]
        elif isinstance(obj, (int, float, str, bool, type(None))):
            return obj
        else:
            # 将不可序列化的对象转换为字符串
            return str(obj)


class DailyFileHandler(logging.FileHandler):
    """每日日志文件处理器，在日期变化时自动切换到新文件"""
    def __init__(self, base_filename, mode='a', encoding='utf-8'):
        self.base_name, self.ext = os.path.splitext(os.path.basename(base_filename))
        self.log_dir = os.path.dirname(base_filename)
        self.today = datetime.now().date()

        super().__init__(self._get_current_filename(), mode, encoding)

    def _get_current_filename(self):
        """基于当前日期获取日志文件名"""
        today_str = self.today.strftime('%Y-%m-%d')
        return os.path.join(self.log_dir, f"{self.base_name}-{today_str}{self.ext}")

    def emit(self, record):
        """发出日志记录，检查日期是否发生变化"""
        today = datetime.now().date()
        if today != self.today:
            # 日期已变化，关闭旧文件并打开新文件
            self.acquire()
            try:
                if self.stream is not None:
                    self.stream.close()
                self.today = today
                self.baseFilename = self._get_current_filename()
                self.stream = self._open()
            finally:
                self.release()

        super().emit(record)


def setup_logger(name, level=logging.INFO, log_file=None, formatter=None):
    """设置日志记录器

    总是输出到控制台；给出 log_file 时同时按天写入文件
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 清除已有的处理器
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = formatter or logging.Formatter(DETAILED_LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = DailyFileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def clean_old_logs(log_dir, days_to_keep=30):
    """清理旧的日志文件，保留最近N天的日志

    只处理形如 name-YYYY-MM-DD.log 的文件，返回删除的文件名列表
    """
    removed = []
    current_date = datetime.now().date()

    for filename in os.listdir(log_dir):
        file_path = os.path.join(log_dir, filename)

        # 跳过目录和隐藏文件
        if os.path.isdir(file_path) or filename.startswith('.'):
            continue

        base_name, ext = os.path.splitext(filename)
        if ext != '.log':
            continue

        try:
            date_part = datetime.strptime(base_name[-10:], '%Y-%m-%d').date()
        except ValueError:
            continue

        if (current_date - date_part).days > days_to_keep:
            try:
                os.remove(file_path)
            except OSError as e:
                logging.getLogger(__name__).warning("删除日志文件失败 %s: %s", filename, e)
                continue
            removed.append(filename)

    return removed


def configure_logging(settings) -> logging.Logger:
    """按配置初始化应用日志，所有模块的 logger 都挂在 pg_api 下"""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    formatter: Optional[logging.Formatter] = JsonFormatter() if settings.log_json else None

    log_file = None
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        clean_old_logs(settings.log_dir)
        log_file = os.path.join(settings.log_dir, MAIN_LOG_NAME)

    logger = setup_logger(ROOT_LOGGER_NAME, level=level, log_file=log_file, formatter=formatter)
    logger.propagate = False
    return logger
