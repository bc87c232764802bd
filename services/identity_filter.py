def normalize_identity(value: str | None) -> str:
    return (value or '').strip().lower()

def is_allowed(allowed_user: str | None, account_name: str | None) -> bool:
    """判断事件账户是否在允许范围内

    两边都去除首尾空白并转为小写后比较；未配置 allowed_user 时全部放行。
    """
    allowed = normalize_identity(allowed_user)
    if not allowed:
        return True
    return normalize_identity(account_name) == allowed
