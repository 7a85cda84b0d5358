# Static content for the Members and Education pages

FOUNDERS = [
    {"id": 1, "name": "Bones", "role": "Founder/Head", "involio": "https://involio.com/bones"},
    {"id": 2, "name": "CRYPTONOMY", "role": "Founder/Head", "involio": "https://involio.com/cryptonomy"},
    {"id": 3, "name": "Kowse", "role": "Founder/Head", "involio": "https://involio.com/kws"},
    {"id": 4, "name": "Mujahid", "role": "Founder/Head", "involio": "https://involio.com/markhor"},
    {"id": 5, "name": "Rehan", "role": "Founder/Head", "involio": "https://involio.com/rehan"},
    {"id": 6, "name": "James Hunter", "role": "Founder/Head", "involio": "https://involio.com/jhunter"},
    {"id": 7, "name": "Kregar", "role": "Founder/Head", "involio": "https://involio.com/kregar"},
]

MEMBERS = [
    {"id": 8, "name": "Insider", "role": "Member", "involio": "https://involio.com/insider"},
    {"id": 9, "name": "ReflexX", "role": "Member", "involio": "https://involio.com/reflex"},
    {"id": 10, "name": "The Accountant", "role": "Member", "involio": "https://involio.com/the_accountant"},
    {"id": 11, "name": "Fortyseven", "role": "Member", "involio": "https://involio.com/fortyseven"},
    {"id": 12, "name": "0x744", "role": "Member", "involio": "https://involio.com/0x744"},
    {"id": 13, "name": "akqxz", "role": "Member", "involio": "https://involio.com/akqxz"},
    {"id": 14, "name": "Aquilae", "role": "Member", "involio": "https://involio.com/aquilae"},
    {"id": 15, "name": "AvarixTrading", "role": "Member", "involio": "https://involio.com/avarix"},
    {"id": 16, "name": "Booobsas", "role": "Member", "involio": "https://involio.com/booobsas"},
    {"id": 17, "name": "Azalion", "role": "Member", "involio": "https://involio.com/azalion"},
    {"id": 18, "name": "Darpan", "role": "Member", "involio": "https://involio.com/darpanet"},
    {"id": 19, "name": "Enigma", "role": "Member", "involio": "https://involio.com/enigma"},
    {"id": 20, "name": "Vortex_Legion", "role": "Member", "involio": "https://involio.com/vortex_legion"},
    {"id": 21, "name": "Johnnyonmeme", "role": "Member", "involio": "https://involio.com/johnnyonmeme"},
    {"id": 22, "name": "Pipsthetrader", "role": "Member", "involio": "https://involio.com/pipsthetrader"},
    {"id": 23, "name": "Prateek", "role": "Member", "involio": "https://involio.com/prateek"},
    {"id": 24, "name": "Starlight", "role": "Member", "involio": "https://involio.com/starlight23"},
    {"id": 25, "name": "Sunday", "role": "Member", "involio": "https://involio.com/sunday"},
]

MARKET_FUNDAMENTALS = {
    "introduction": (
        "Market fundamentals form the foundation of successful trading and investment strategies. "
        "Understanding these core principles is essential for making informed decisions in financial markets."
    ),
    "sections": [
        {
            "title": "Understanding Market Structure",
            "content": (
                "Markets operate through the interaction of buyers and sellers. Learn about bid-ask spreads, "
                "order books, market depth, and how liquidity affects price movements. Understanding market "
                "microstructure helps you identify optimal entry and exit points."
            ),
        },
        {
            "title": "Supply and Demand Dynamics",
            "content": (
                "The fundamental law of economics drives all markets. Price moves based on the relationship "
                "between supply (sellers) and demand (buyers). When demand exceeds supply, prices rise. When "
                "supply exceeds demand, prices fall. Recognizing these imbalances is key to predicting price movements."
            ),
        },
        {
            "title": "Price Action and Market Sentiment",
            "content": (
                "Market sentiment reflects the overall attitude of investors. Understanding fear, greed, and "
                "neutral sentiment helps predict market behavior. Price action reveals what the market is "
                "actually doing versus what indicators suggest it should do."
            ),
        },
        {
            "title": "Economic Indicators",
            "content": (
                "Key economic data drives market movements: GDP growth, inflation rates (CPI, PPI), employment "
                "data, interest rates, and consumer confidence. Central bank policies and their impact on "
                "currency valuations are crucial for forex and equity markets."
            ),
        },
        {
            "title": "Market Cycles and Trends",
            "content": (
                "Markets move in cycles: accumulation, markup, distribution, and markdown phases. Identifying "
                "which phase you're in helps determine appropriate strategies. Trends can be short-term, "
                "intermediate, or long-term. 'The trend is your friend' - trading with the trend increases "
                "probability of success."
            ),
        },
        {
            "title": "Volume Analysis",
            "content": (
                "Volume confirms price movements. High volume during uptrends confirms strength; high volume "
                "during downtrends confirms weakness. Low volume can indicate lack of conviction or potential "
                "reversals. Volume precedes price - smart money shows up in volume before price moves."
            ),
        },
        {
            "title": "Market Participants",
            "content": (
                "Understanding who's trading matters: retail traders, institutional investors, hedge funds, "
                "market makers, and algorithmic traders all have different timeframes and objectives. "
                "Recognizing their footprints in the market provides edge."
            ),
        },
        {
            "title": "Correlation and Intermarket Analysis",
            "content": (
                "Assets don't trade in isolation. Stock markets correlate with bonds, commodities, and "
                "currencies. Understanding these relationships helps predict moves across asset classes. "
                "Risk-on vs risk-off sentiment affects global markets simultaneously."
            ),
        },
        {
            "title": "Time Frames and Multi-Timeframe Analysis",
            "content": (
                "Higher timeframes show the bigger picture and major trends. Lower timeframes provide precise "
                "entry and exit points. Successful traders align multiple timeframes to ensure their trades "
                "match the overall market direction."
            ),
        },
        {
            "title": "Key Principles to Remember",
            "content": (
                "• Markets discount future expectations, not current news\n"
                "• Price is the ultimate truth - it reflects all known information\n"
                "• Markets can remain irrational longer than you can remain solvent\n"
                "• Risk management is more important than being right\n"
                "• Consistency beats home runs - focus on repeatable processes\n"
                "• Markets reward patience and discipline, not impulsiveness"
            ),
        },
    ],
    "conclusion": (
        "Mastering market fundamentals takes time and practice. These principles apply across all markets - "
        "stocks, forex, crypto, commodities. Build your foundation strong, and advanced strategies will be "
        "easier to implement. The best traders never stop learning the basics."
    ),
}

EDUCATION_RESOURCES = [
    {"id": 1, "title": "Market Fundamentals", "category": "Core Concepts", "icon": "📊",
     "detailed_content": MARKET_FUNDAMENTALS},
    {"id": 2, "title": "Technical Analysis Mastery", "category": "Advanced Techniques", "icon": "📈"},
    {"id": 3, "title": "Risk Management Frameworks", "category": "Portfolio Strategy", "icon": "🛡️"},
    {"id": 4, "title": "Macroeconomic Analysis", "category": "Market Research", "icon": "🌐"},
    {"id": 5, "title": "Derivatives Trading", "category": "Advanced Instruments", "icon": "💰"},
    {"id": 6, "title": "Algorithmic Trading Basics", "category": "Modern Methods", "icon": "🤖"},
]


def members_page() -> dict:
    return {"founders": FOUNDERS, "members": MEMBERS}


def education_page() -> dict:
    return {"resources": EDUCATION_RESOURCES}
