from __future__ import annotations

QUESTIONS_USER_TEMPLATE = """A student has provided the following material (transcript or text):

"{transcript}"

Your task:
- Analyze the material and identify the main concepts, facts, or ideas.
- Generate 2–3 open-ended or short-answer quiz questions that test the student's understanding of the material.
- The questions should require the student to recall, explain, or apply what they learned (not just reflect or give opinions).
- Do NOT generate multiple choice questions. Do NOT ask for personal reflection.
- Focus on comprehension, recall, and application.

Return only the final quiz questions as a list."""

SUMMARY_USER_TEMPLATE = """A student has shared this reflection transcript:

"{transcript}"

Please analyze this transcript and create a well-structured summary with the following format:

**Key Themes:**
• [Theme 1 - 1-2 sentences]
• [Theme 2 - 1-2 sentences]

**Important Insights:**
• [Insight 1 - 1-2 sentences]
• [Insight 2 - 1-2 sentences]

**Personal Growth:**
• [Growth area 1 - 1-2 sentences]
• [Growth area 2 - 1-2 sentences]

Focus on extracting meaningful insights rather than just summarizing what was said. Use clear, concise language and ensure each bullet point is substantive."""

MIND_MAP_SYSTEM = (
    "You are an expert educational content analyzer. Your job is to extract key concepts, themes, "
    "and insights from educational content and organize them into meaningful hierarchical structures. "
    "Focus on identifying the most important ideas and relationships, not on summarizing or repeating the content."
)

MIND_MAP_USER_TEMPLATE = """You are a mind map generator assistant.

Analyze the following transcript or text content and create a hierarchical mind map that extracts and organizes the KEY CONCEPTS, THEMES, and INSIGHTS from the material. Do NOT simply repeat or summarize the transcript - instead, identify the main ideas, concepts, and relationships.

Your task:
1. Identify the central topic or main subject
2. Extract 3-5 key themes or categories from the content
3. For each theme, identify 2-3 important subtopics or concepts
4. Add relevant details or examples that support each subtopic

Focus on:
- Main concepts and ideas
- Key themes and patterns
- Important relationships between ideas
- Supporting evidence or examples
- Learning objectives or takeaways

### Output format:
Return only valid JSON with this structure:

{{
  "topic": "string (central topic - the main subject or theme)",
  "categories": [
    {{
      "title": "string (category title - a key theme or concept area)",
      "type": "category",
      "nodes": [
        {{
          "title": "string (subtopic - specific concept or idea within the category)",
          "type": "subtopic",
          "children": [
            {{
              "title": "string (detail - supporting point, example, or explanation)",
              "type": "detail"
            }}
          ]
        }}
      ]
    }}
  ]
}}

Do not include markdown, code fences, or commentary. Focus on extracting meaningful concepts, not just repeating the text.

Content to analyze:
"{transcript}\""""

# max_tokens per artifact
QUESTIONS_MAX_TOKENS = 300
SUMMARY_MAX_TOKENS = 400
MIND_MAP_MAX_TOKENS = 1500
