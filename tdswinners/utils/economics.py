from tdswinners.utils.settings import get_settings


def sol_to_lamports(sol: float) -> int:
    """
    Convert a SOL amount into lamports, rounding to the nearest lamport.
    """
    return int(round(sol * get_settings().TDS_LAMPORTS_PER_SOL))


def lamports_to_sol(lamports: int) -> float:
    return lamports / get_settings().TDS_LAMPORTS_PER_SOL
