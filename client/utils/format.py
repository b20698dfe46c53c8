from datetime import datetime

SIZE_UNITS = ('Bytes', 'KB', 'MB', 'GB', 'TB')


def format_file_size(size) -> str:
    """1536 -> '1.5 KB'，保留两位小数并去掉末尾的 0"""
    size = int(size or 0)
    if size <= 0:
        return '0 Bytes'
    i = 0
    value = float(size)
    while value >= 1024 and i < len(SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {SIZE_UNITS[i]}"


def format_date(value, tz=None) -> str:
    """ISO 时间串转成本地时间 'YYYY-MM-DD HH:MM'，无法解析时原样返回"""
    if not value:
        return '—'
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return value
    return dt.astimezone(tz).strftime('%Y-%m-%d %H:%M')
