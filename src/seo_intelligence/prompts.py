"""
Prompt text for the three generation operations.

Prompt wording is the provider's concern; the pipeline only guarantees that
every request carries a non-empty instructive prompt.
"""

# Appended after a binary document so the instructions are restated
DOCUMENT_FOLLOWUP = "Here is the document to analyze and optimize."

# Prefix for pasted/extracted text attached to the analysis prompt
ORIGINAL_CONTENT_PREFIX = "Original Content:\n"

# System prompt for schema-constrained requests; {schema} is the JSON Schema
JSON_OUTPUT_SYSTEM_PROMPT = """You are a structured data generator for an SEO platform.

OUTPUT FORMAT - MUST FOLLOW:
- Respond with a single JSON value that conforms to the JSON Schema below
- Include every required field
- Use ONLY the listed values for enumerated fields
- Integers must be whole numbers within the stated minimum/maximum
- Return NOTHING but the JSON: no commentary, no explanations

JSON SCHEMA:
{schema}"""


def build_keyword_prompt(seed: str, country: str) -> str:
    """Build the keyword research prompt for a seed term and market."""
    return f"""You are a Senior SEO Strategist acting for a high-end agency.
Analyze the seed keyword: "{seed}" for the market: {country}.

Your Goal: Identify high-ROI opportunities, not just generic volume.

Instructions:
1. Generate 12-15 keyword opportunities.
2. MIX: 30% Head terms (High Vol), 50% Long-tail (High Intent), 20% "Hidden Gem" (Low difficulty, decent volume).
3. Classify intent accurately. "Commercial" and "Transactional" are priority for ROI.
4. Estimate difficulty based on current SERP competitiveness for this niche (0-100).

Output strict JSON."""


def build_analysis_prompt(content_type: str, audience: str, goal: str) -> str:
    """Build the smart content analysis prompt for the given context."""
    content_type = content_type or "general"
    audience = audience or "general"
    goal = goal or "optimize"
    schema_type = content_type if content_type != "general" else "Article"

    return f"""You are an elite SEO Content Strategist.
Your task is to analyze the user's content and fully OPTIMIZE it for search engines while improving readability for humans.

Context:
- Content Type: {content_type}
- Target Audience: {audience}
- Primary Goal: {goal}

Analysis Instructions:
1. Evaluate the content's depth, authority (E-E-A-T), and keyword integration.
2. Identify gaps in topic coverage compared to top-ranking competitors.
3. Check for Entity Salience - ensure main entities are clear.

Optimization Actions:
1. Rewrite the content to match the voice but improve clarity, structure, and keyword flow.
2. Use Markdown headers (H1, H2, H3) to create a scannable hierarchy.
3. Integrate semantic keywords naturally.
4. Ensure the first paragraph matches the search intent.

Technical Assets:
- Generate a click-worthy Meta Title (under 60 chars).
- Generate a compelling Meta Description (under 160 chars) with a call to action.
- Create valid JSON-LD Schema appropriate for the '{schema_type}' (e.g., Article, Product, FAQPage).

Return result in strict JSON."""


def build_strategy_prompt(domain: str, business_type: str, goals: str) -> str:
    """Build the 3-month strategy prompt for a client profile."""
    return f"""Act as a Senior SEO Consultant creating a bespoke 3-month strategy.

Client Profile:
- Domain: {domain}
- Business: {business_type}
- Primary Goal: {goals}

Requirements:
1. Break down strategy into Month 1 (Foundation & Technical), Month 2 (Content & Clusters), Month 3 (Authority & Outreach).
2. Provide specific, actionable tactics, not generic advice.
3. IMPORTANT: For each major tactic, explain WHY it was chosen for a {business_type} business.
4. Define specific KPIs to measure success for this business type.

Output Format:
Return ONLY raw HTML (no markdown blocks, no <html> tags).
Use <h2> for month headers, <h3> for tactic headers, <section> for each month,
<ul>/<li> for lists, <p> for body text and <strong> for highlights."""
