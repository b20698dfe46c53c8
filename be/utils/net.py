def client_ip(request) -> str:
    """取客户端 IP，优先 X-Forwarded-For 的第一跳"""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'unknown'
