"""
Narrative explanation renderer for randomization-inference results.

Each public ``explain_*`` function takes a result object and returns a
formatted multi-line string. The result's ``executive_summary()`` method
calls the appropriate function here.
"""
from __future__ import annotations

_SEP = "━" * 66


# ── Shared helpers ─────────────────────────────────────────────────────────────

def _fmt_p(p: float) -> str:
    if p == 0:
        return "p = 0"
    if p < 0.001:
        return "p < 0.001"
    return f"p = {p:.3f}"


def _fmt_ci(lo: float, hi: float) -> str:
    return f"[{lo:.4f}, {hi:.4f}]"


def _assumptions_section(assumptions: list) -> str:
    n = len(assumptions)
    n_u = sum(1 for a in assumptions if not a.testable)
    if n_u == n:
        intro = (
            f"All {n} required assumptions are untestable from the data alone "
            f"and must be justified by the design of the experiment."
        )
    else:
        intro = (
            f"{n_u} of the {n} required assumptions {'is' if n_u == 1 else 'are'} untestable "
            f"and must be justified by the design of the experiment."
        )
    lines = ["ASSUMPTIONS", intro, ""]
    for a in assumptions:
        lines.append(f"  {a.fmt_tag()}  {a.name}")
    return "\n".join(lines)


# ── Procedure-specific explanations ────────────────────────────────────────────

def explain_randomization(result) -> str:
    n, m = result._n_units, result._n_treated
    lo, hi = result.conf_int()
    how = (
        f"every one of the possible ways of choosing {m} of {n} units"
        if result._method == "full enumeration" else
        f"{len(result)} independent random choices of {m} of {n} units"
    )

    blocks = [
        "\n".join([_SEP, "Executive Summary — Randomization Distribution",
                   f"  {m} of {n} units treated  |  estimator: difference in means", _SEP]),

        "\n".join([
            "METHOD",
            f"Both potential outcomes are known for every unit, so the experiment can "
            f"be re-run on paper. Treatment was assigned under {how}; each time only "
            f"the outcome matching the assigned arm was revealed and the difference in "
            f"mean outcomes between treated and control units was recorded. The spread "
            f"of those estimates is the standard error of the estimator.",
        ]),

        _assumptions_section(result.assumptions),

        "\n".join([
            "RESULT",
            f"The true ATE is {result.true_ate:.4f}. The estimates average "
            f"{result.mean:.4f} (bias {result.bias:+.4f}) with a standard error of "
            f"{result.std_err:.4f}; 95% of them fall in {_fmt_ci(lo, hi)}.",
        ]),

        "\n".join([
            "CAVEATS",
            "A single real experiment yields one draw from this distribution. "
            "Estimator unbiasedness is a statement about the average over "
            "assignments, not about any one experiment.",
        ]),

        _SEP,
    ]
    return "\n\n".join(blocks)


def explain_permutation(result) -> str:
    e = result.observed_effect
    lo, hi = result.pvalue_conf_int("two-sided")
    sample_note = (
        "Every assignment was enumerated, so the p-values are exact."
        if result._method == "exact" else
        f"With {result.trials} random permutations the two-sided p-value is known "
        f"to within {_fmt_ci(lo, hi)} (95%, simulation error only)."
    )

    blocks = [
        "\n".join([_SEP, "Executive Summary — Permutation Test",
                   f"  observed effect: {e:.4f}  |  H0: no effect for any unit", _SEP]),

        "\n".join([
            "METHOD",
            "Under the sharp null hypothesis every unit's outcome would have been the "
            "same whichever arm it was assigned to, so the observed outcomes are held "
            "fixed and the treatment labels are shuffled. The difference in means under "
            "each shuffle forms the null distribution the observed effect is compared to.",
        ]),

        _assumptions_section(result.assumptions),

        "\n".join([
            "RESULT",
            f"An effect at least as large as {e:.4f} occurs in {result.one_sided_p:.2%} of "
            f"shuffles (one-sided {_fmt_p(result.one_sided_p)}); one at least as large in "
            f"magnitude occurs in {result.two_sided_p:.2%} (two-sided "
            f"{_fmt_p(result.two_sided_p)}). {sample_note}",
        ]),

        "\n".join([
            "CAVEATS",
            "Rejecting the sharp null says some unit responds to treatment; it says "
            "nothing about the size of the average effect. With few units the number "
            "of distinct assignments is small and so is the smallest attainable p-value.",
        ]),

        _SEP,
    ]
    return "\n\n".join(blocks)
