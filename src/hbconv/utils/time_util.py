def format_runtime(seconds: float) -> str:
    total = int(seconds)
    hours = total // 3600
    mins = (total % 3600) // 60
    secs = total % 60
    return f"{hours:02d}:{mins:02d}:{secs:02d}"
