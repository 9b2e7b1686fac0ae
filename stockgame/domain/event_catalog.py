"""Market event templates dealt by the card generator.

Each entry is (template_id, type, title, description, sector, impact).
Stock events move every stock of the sector by a dollar amount. Cash events
(inflation/deflation) have no sector and move every player's cash by a percent.
"""

EVENT_TEMPLATES = [
    ("auto-sales-uptick", "positive", "Auto Sales Increase", "Vehicle sales show modest improvement", "Automotive", 5),
    ("auto-inventory-buildup", "negative", "Auto Inventory Buildup", "Excess inventory concerns weigh on automotive stocks", "Automotive", -5),
    ("auto-recall", "negative", "Automotive Recall", "Major safety recall impacts automotive industry", "Automotive", -10),
    ("ev-sales-boost", "positive", "EV Sales Surge", "Electric vehicle demand exceeds expectations", "Automotive", 10),
    ("energy-prices-stable", "positive", "Energy Prices Stabilize", "Oil and gas prices find steady footing", "Energy", 5),
    ("energy-demand-drop", "negative", "Energy Demand Softens", "Lower than expected energy consumption reported", "Energy", -5),
    ("renewable-competition", "negative", "Renewable Energy Competition", "Fossil fuel demand concerns impact traditional energy", "Energy", -10),
    ("opec-production-cut", "positive", "OPEC Cuts Production", "Oil prices surge on supply reduction announcement", "Energy", 10),
    ("oil-discovery", "positive", "New Oil Reserves Found", "Major discovery increases energy sector optimism", "Energy", 15),
    ("energy-crisis", "negative", "Energy Supply Crisis", "Supply disruptions cause energy price volatility", "Energy", -15),
    ("consumer-confidence", "positive", "Consumer Confidence Up", "Consumer sentiment improves slightly", "Consumer", 5),
    ("retail-sales-weak", "negative", "Weak Retail Sales", "Monthly retail figures disappoint investors", "Consumer", -5),
    ("consumer-boom", "positive", "Consumer Spending Surge", "Holiday season drives record consumer activity", "Consumer", 10),
    ("consumer-debt-warning", "negative", "Consumer Debt Concerns", "Rising household debt levels worry retail sector", "Consumer", -10),
    ("e-commerce-growth", "positive", "E-commerce Explosion", "Online retail sales hit all-time highs", "Consumer", 15),
    ("supply-chain-crisis", "negative", "Supply Chain Disruption", "Global shipping crisis impacts consumer goods", "Consumer", -15),
    ("global-stimulus", "positive", "Massive Consumer Stimulus", "Government stimulus packages boost consumer spending", "Consumer", 20),
    ("recession-fears", "negative", "Recession Concerns", "Economic downturn fears hit consumer discretionary spending", "Consumer", -20),
    ("health-research-funding", "positive", "Healthcare Funding Boost", "Government increases medical research grants", "Healthcare", 5),
    ("drug-trial-delay", "negative", "Drug Trial Delayed", "Key pharmaceutical trials face setbacks", "Healthcare", -5),
    ("fda-approvals", "positive", "Multiple FDA Approvals", "Wave of new drug approvals boosts healthcare sector", "Healthcare", 10),
    ("health-scandal", "negative", "Healthcare Scandal", "Major pharmaceutical company faces legal troubles", "Healthcare", -10),
    ("pandemic-fears", "negative", "Health Crisis Concerns", "New disease outbreak causes healthcare uncertainty", "Healthcare", -10),
    ("biotech-breakthrough", "positive", "Biotech Innovation", "Breakthrough in gene therapy shows promise", "Healthcare", 15),
    ("drug-pricing-pressure", "negative", "Drug Pricing Regulations", "New regulations threaten pharmaceutical pricing power", "Healthcare", -15),
    ("medical-breakthrough", "positive", "Medical Breakthrough", "Revolutionary treatment approved, healthcare stocks soar", "Healthcare", 20),
    ("healthcare-reform", "negative", "Healthcare Reform Bill", "Major legislative changes threaten healthcare profits", "Healthcare", -20),
    ("pandemic-solution", "positive", "Pandemic Solution", "Effective vaccine rollout boosts healthcare optimism", "Healthcare", 20),
    ("tech-earnings-beat", "positive", "Tech Earnings Beat", "Major tech companies report strong quarterly results", "Technology", 5),
    ("tech-bug-discovery", "negative", "Tech Bug Discovery", "Software vulnerabilities found in major platforms", "Technology", -5),
    ("tech-innovation", "positive", "Tech Innovation Wave", "New product launches drive tech sector enthusiasm", "Technology", 10),
    ("tech-antitrust", "negative", "Tech Antitrust Investigation", "Major tech companies face antitrust scrutiny", "Technology", -10),
    ("cloud-computing-boom", "positive", "Cloud Computing Surge", "Enterprise cloud adoption accelerates dramatically", "Technology", 15),
    ("chip-shortage", "negative", "Semiconductor Shortage", "Chip supply issues impact tech production", "Technology", -15),
    ("ai-revolution", "positive", "AI Revolution Accelerates", "Artificial intelligence drives massive productivity gains", "Technology", 20),
    ("cyber-attack-wave", "negative", "Major Cyber Attacks", "Coordinated cyber attacks cripple tech infrastructure", "Technology", -20),
    ("merger-mania", "positive", "Tech M&A Wave", "Record merger activity drives tech valuations", "Technology", 20),
    ("quantum-computing", "positive", "Quantum Computing Breakthrough", "Major advancement in quantum computing revolutionizes tech", "Technology", 25),
    ("tech-bubble-fears", "negative", "Tech Bubble Concerns", "Overvaluation fears trigger tech sector selloff", "Technology", -25),
    ("metaverse-boom", "positive", "Metaverse Explosion", "Virtual reality adoption drives unprecedented tech growth", "Technology", 25),
    ("bank-earnings-beat", "positive", "Banks Beat Earnings", "Major banks report better than expected quarterly results", "Finance", 5),
    ("bank-fees-increase", "negative", "Banking Fee Changes", "New fee structure announced by banks", "Finance", -5),
    ("fintech-disruption", "positive", "Fintech Innovation Wave", "Digital banking solutions drive financial sector growth", "Finance", 10),
    ("loan-defaults-rise", "negative", "Rising Loan Defaults", "Increased default rates concern financial institutions", "Finance", -10),
    ("bank-merger", "positive", "Major Bank Merger", "Consolidation creates financial sector mega-institution", "Finance", 15),
    ("credit-crunch", "negative", "Credit Crunch", "Tightening lending standards impact financial sector", "Finance", -15),
    ("interest-rate-cut", "positive", "Major Interest Rate Cut", "Central bank announces aggressive rate cuts", "Finance", 20),
    ("interest-rate-hike", "negative", "Aggressive Rate Hikes", "Central bank raises rates to combat inflation", "Finance", -20),
    ("banking-collapse", "negative", "Banking System Stress", "Major bank failures trigger financial sector concerns", "Finance", -20),
    ("deregulation-boost", "positive", "Financial Deregulation", "Regulatory rollback boosts banking profitability", "Finance", 25),
    ("financial-crisis-fears", "negative", "Financial Crisis Warning", "Systemic risk indicators trigger market concerns", "Finance", -25),
    ("crypto-adoption", "positive", "Cryptocurrency Mainstreaming", "Major banks embrace crypto, driving financial innovation", "Finance", 25),
    ("central-bank-crisis", "negative", "Central Bank Emergency", "Emergency monetary measures signal deep financial stress", "Finance", -30),
    ("financial-renaissance", "positive", "Financial System Overhaul", "Comprehensive reforms unlock massive financial sector growth", "Finance", 30),
]

CASH_EVENT_TEMPLATES = [
    ("mild-inflation", "inflation", "Inflation Uptick", "Rising prices erode the value of cash holdings", None, -5),
    ("inflation-surge", "inflation", "Inflation Surge", "Consumer prices jump sharply, cash loses purchasing power", None, -10),
    ("mild-deflation", "deflation", "Deflation Pressure", "Falling prices increase the purchasing power of cash", None, 5),
]

CRASH_TEMPLATE = (
    "crash",
    "{sector_upper} SECTOR CRASH!",
    "Panic selling triggers massive collapse in {sector} sector",
)
BULL_RUN_TEMPLATE = (
    "bull_run",
    "{sector_upper} BULL RUN!",
    "Massive investor optimism drives unprecedented rally in {sector} sector",
)
