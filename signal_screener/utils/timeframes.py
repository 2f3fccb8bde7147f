"""Timeframe string to minutes conversion."""


def timeframe_minutes(tf: str) -> int:
    """Convert a timeframe like '30m', '1h', '6h', '1d', '1w' to minutes."""
    tf = tf.strip().lower()
    if len(tf) < 2 or not tf[:-1].isdigit():
        raise ValueError(f"Unsupported timeframe: {tf}")
    n = int(tf[:-1])
    if tf.endswith("m"):
        return n
    if tf.endswith("h"):
        return n * 60
    if tf.endswith("d"):
        return n * 60 * 24
    if tf.endswith("w"):
        return n * 60 * 24 * 7
    raise ValueError(f"Unsupported timeframe: {tf}")
