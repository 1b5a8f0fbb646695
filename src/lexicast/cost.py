"""
Token and cost estimation for audio analysis.
"""

DEFAULT_RATES: dict[str, float] = {
    "audio_tokens_per_sec": 32.0,
    "prompt_tokens": 1200.0,
    "tokens_out_per_min": 450.0,
    "audio_in_per_mtok": 1.00,
    "out_per_mtok": 2.50,
}


def estimate_costs(audio_minutes: float, *, rates: dict[str, float] | None = None) -> dict[str, float]:
    """Estimate tokens and USD cost of analyzing ``audio_minutes`` of audio."""
    r = {**DEFAULT_RATES, **(rates or {})}
    minutes = max(0.0, float(audio_minutes))
    tokens_in = minutes * 60.0 * float(r["audio_tokens_per_sec"]) + float(r["prompt_tokens"])
    tokens_out = minutes * float(r["tokens_out_per_min"])
    input_cost = (tokens_in / 1_000_000.0) * float(r["audio_in_per_mtok"])
    output_cost = (tokens_out / 1_000_000.0) * float(r["out_per_mtok"])
    return {
        "tokens_in": tokens_in,
        "tokens_out": tokens_out,
        "input_cost": input_cost,
        "output_cost": output_cost,
        "total": input_cost + output_cost,
    }
