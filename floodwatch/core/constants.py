"""
Application constants.
"""

API_DESCRIPTION = """
    ## Floodwatch API

    Backend for a river flood early-warning station:

    * **Ingest**: field devices post water level and flow readings
    * **Classification**: each reading is scored by the prediction service,
      with a local threshold rule when that service is unreachable
    * **Alerts**: FLOOD and DANGER verdicts are pushed to a Telegram chat
    * **Daily summaries**: one rollup row per civil day, computed nightly

    ### Reading payload
    Fields may be sent under their English names (`right_level`, `left_level`,
    `right_flow`, `left_flow`) or the legacy device keys (`h_kanan`, `h_kiri`,
    `q_kanan`, `q_kiri`). The capture time is assigned by the server.
    """
