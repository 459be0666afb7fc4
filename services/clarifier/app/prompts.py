from __future__ import annotations

PROMPT_VERSION = "clarify_v1.0"

PLAN_TEMPLATE = """You are an expert at improving prompts. Analyze the prompt the user entered and write concrete questions about the parts that are ambiguous.

Analyze it against these criteria:
1. Context: is the background or situation of the prompt clear?
2. Purpose: is the desired result or goal clear?
3. Audience: is the target audience or user clear?
4. Format: is the desired output format or structure clear?
5. Constraints: are the limits or requirements clear?

Question rules:
- Write exactly 5 questions (never more than 5).
- Ask at least one question from each category (context, purpose, audience, format, constraints).
- Even when the prompt is simple, find room for improvement and complete all 5 questions.
- Prioritize and keep only the 5 most important questions.

Example answer rules:
- Give exactly 6 concrete example answers for every question.
- Each example must directly answer its question.
- Examples must be specific, detailed answers a real user could type.
- Cover a variety of situations and industries to widen the choice.

Example of good example answers:
Question: "What is the specific context or situation in which this prompt will be used?"
- "Preparing an investor deck for a product-launch marketing strategy meeting"
- "Creating teaching material that explains photosynthesis to 8th-grade science students"
- "Writing an internal training manual on how to use the new CRM system"
- "Planning an email campaign introducing products to online store customers"
- "Giving a cover-letter writing guide at a job-seeking seminar for university students"
- "Developing a basic digital marketing course for small business owners"

Respond with JSON in exactly this shape:
{
  "ambiguousAreas": ["ambiguous area 1", "ambiguous area 2", "ambiguous area 3"],
  "suggestedQuestions": [
    {
      "id": "q1",
      "question": "the concrete question",
      "examples": ["answer 1", "answer 2", "answer 3", "answer 4", "answer 5", "answer 6"],
      "category": "context|purpose|audience|format|constraints"
    }
  ],
  "detectedIntent": "the detected intent",
  "complexity": "simple|medium|complex"
}"""

SYNTHESIS_DIRECTIVES = """Based on the user's request and the additional information above, look for as many relevant references as you can and think it through carefully, then give a detailed, concrete answer to the user's request. The answer must be thorough and practical and must take all of the provided information into account.

**Important rules:**
1. Write the answer in Markdown.
   - Organize it hierarchically with #, ##, ### headings
   - Use - or 1. for lists
   - Use **bold** and *italics* for emphasis
   - Use ```language fenced blocks for code
   - Use [text](URL) for links
   - Use Markdown tables for tables
   - Use line breaks and spacing for readability

2. **Use real data only:**
   - Never invent example data or fictional links
   - Only link to websites, blogs and pages that actually exist
   - **Never provide YouTube or other video-sharing links**
   - Only recommend services, tools and resources that actually exist
   - Every link must be a real, reachable URL
   - Only use channel, service and tool names that actually exist
   - Do not give hypothetical examples such as "(example)", "(sample data)" or "for instance"
   - Do not guess at what you do not know; only give information that can be verified"""

STARTER_PROMPTS: dict[str, list[str]] = {
    "Career": [
        "I want to get a job as a software developer. I need tips on building a portfolio and preparing for interviews",
        "I'm preparing for a marketing interview at a large company. Tell me the likely questions and how to answer them",
        "I'm thinking about a career change. Should I quit my current job and move into a new field?",
        "I'm applying for public-sector jobs. Tell me concretely how to prepare for the document screening and interviews",
    ],
    "Investing": [
        "I want to invest 20 million won of savings efficiently. How should I split it between crypto and US stocks?",
        "I'm an office worker in my 30s and want to invest 20% of my salary. Recommend methods a beginner can follow",
        "I want to start investing in real estate. Is an apartment or a studio officetel the better choice?",
        "I want to build a long-term investment strategy for my retirement fund",
    ],
    "Travel": [
        "I want to plan a 4-day trip to Osaka. Please recommend restaurants and sights",
        "I'm planning a backpacking trip through Europe. Which countries and itinerary work for two weeks on a 2 million won budget?",
        "I'm traveling alone to Jeju island. Recommend a route I can do by public transport without a rental car",
        "I'm preparing a trip to Bangkok. Tell me about hidden restaurants and sights locals go to",
    ],
    "Health": [
        "I want to get in shape. Tell me a gym routine and diet an office worker can keep up",
        "I'm starting a diet. I need a way to exercise consistently as a complete beginner",
        "I have a herniated disc, so my exercise is limited. Recommend exercises I can do safely",
        "I want to build muscle. Tell me a home workout routine and diet that can get me there",
    ],
    "Business": [
        "I want to start a business. Recommend ideas I can start with 5 million won of initial capital",
        "I want to run an online store. I need a step-by-step guide for someone starting out",
        "I'm considering opening a franchise. How should I choose a brand?",
        "I'm looking for online business ideas I can start as a side job",
    ],
    "Learning": [
        "I'm learning to program for the first time. Which language should I start with?",
        "I want to improve my spoken English. Tell me a study method that fits into one hour a day",
        "I want to learn design. Make me a roadmap for becoming a UI/UX designer",
        "I want to become a data analyst. Tell me the skills I need and the order to learn them",
    ],
    "Relationships": [
        "I've started to like someone. How can I get closer to them?",
        "I feel very down after a breakup. I need ways to pull myself together",
        "I'm getting ready for a blind date. Tell me how to make a good first impression",
        "Things are awkward with a coworker. I need ways to keep good relationships at work",
    ],
}


def build_plan_prompt(user_prompt: str) -> str:
    return f'{PLAN_TEMPLATE}\n\nPrompt to analyze: "{user_prompt}"'
