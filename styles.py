def get_css(theme: str = "dark"):
    if theme == "light":
        bg = "#F7F9FC"
        text = "#0F172A"
        card_bg = "rgba(255, 255, 255, 0.92)"
        card_border = "rgba(74, 108, 247, 0.18)"
        subtle_text = "rgba(15, 23, 42, 0.70)"
        sidebar_bg = "#FFFFFF"
        sidebar_border = "rgba(74, 108, 247, 0.12)"
    else:
        bg = "#0B1120"
        text = "#F8FAFC"
        card_bg = "rgba(17, 24, 39, 0.80)"
        card_border = "rgba(74, 108, 247, 0.25)"
        subtle_text = "rgba(248, 250, 252, 0.68)"
        sidebar_bg = "#0B1120"
        sidebar_border = "rgba(74, 108, 247, 0.20)"

    primary = "#4A6CF7"
    primary_2 = "#2BC8B7"

    return f"""
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

    :root {{
      --bg: {bg};
      --text: {text};
      --subtle: {subtle_text};
      --primary: {primary};
      --primary2: {primary_2};
      --card-bg: {card_bg};
      --card-border: {card_border};
      --sidebar-bg: {sidebar_bg};
      --sidebar-border: {sidebar_border};
      --radius-lg: 14px;
      --radius-xl: 18px;
    }}

    html, body, [class*="css"] {{
      font-family: Inter, ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif;
    }}

    .stApp {{
      background:
        radial-gradient(800px circle at 15% 0%, rgba(74, 108, 247, 0.14), transparent 55%),
        radial-gradient(900px circle at 85% 15%, rgba(43, 200, 183, 0.10), transparent 55%),
        var(--bg);
      color: var(--text);
    }}

    [data-testid="stSidebar"] {{
      background: var(--sidebar-bg);
      border-right: 1px solid var(--sidebar-border);
    }}

    .brand {{
      display: flex;
      align-items: center;
      gap: 10px;
      margin: 0 0 12px 0;
    }}
    .brand-mark {{
      width: 28px;
      height: 28px;
      border-radius: 8px;
      background: linear-gradient(135deg, var(--primary), var(--primary2));
    }}
    .brand-name {{
      font-weight: 700;
      letter-spacing: 1px;
      color: var(--text);
      font-size: 1.2rem;
    }}

    [data-testid="stMetric"], .stPlotlyChart {{
      background: var(--card-bg);
      border: 1px solid var(--card-border);
      border-radius: var(--radius-xl);
      padding: 16px;
      box-shadow: 0 12px 40px rgba(0,0,0,0.18);
    }}

    [data-testid="stMetricValue"] {{
      font-weight: 700;
      color: var(--text);
    }}
    [data-testid="stMetricLabel"] {{
      color: var(--subtle);
      font-weight: 500;
    }}

    button[kind="primary"] {{
      background: linear-gradient(135deg, var(--primary), var(--primary2)) !important;
      color: #fff !important;
      border: 1px solid rgba(255,255,255,0.08) !important;
      border-radius: var(--radius-lg) !important;
      font-weight: 700 !important;
    }}

    button[kind="secondary"] {{
      background: rgba(255,255,255,0.04) !important;
      color: var(--text) !important;
      border: 1px solid var(--card-border) !important;
      border-radius: var(--radius-lg) !important;
      font-weight: 600 !important;
    }}
    button[kind="secondary"]:hover {{
      background: rgba(74, 108, 247, 0.12) !important;
    }}

    .stCaption, .app-footer {{
      color: var(--subtle);
    }}
    .app-footer {{
      text-align: center;
      font-size: 0.85rem;
      border-top: 1px solid var(--card-border);
      padding-top: 12px;
      margin-top: 24px;
    }}

    a {{
      color: var(--primary);
    }}
    </style>
    """
