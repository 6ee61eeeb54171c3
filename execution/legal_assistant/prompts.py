"""
Prompt templates for the Legal Assistant.

Templates use str.format placeholders. {language_name} and {jurisdiction}
come from AssistantConfig so the same templates serve other legal systems.
"""

LANGUAGE_NAMES = {
    "es": "Spanish",
    "en": "English",
    "pt": "Portuguese",
}

PROMPTS = {
    "answer": """You are a legal expert specializing in the law of {jurisdiction}. Answer the following legal question based on the provided context.

Context:
{context}
{additional_context}
Question: {question}

Please provide a comprehensive legal answer in {language_name}, citing relevant laws and precedents when possible.""",

    "reasoning": """Explain the legal reasoning behind answering this question: "{question}"

Based on the following legal context:
{context}

Please explain:
1. The legal principles involved
2. How the context applies to the question
3. The reasoning process
4. Potential legal implications

Provide a clear, logical legal analysis in {language_name}.""",

    "draft": """You are an expert lawyer in {jurisdiction}. Generate a professional legal document based on the following requirements.

Document Type: {document_type}
Title: {title}
Request: {prompt}
{additional_context}
Context from relevant legal sources:
{context}

Please generate a complete, professional legal document in {language_name} that includes:
1. Proper legal formatting and structure
2. Clear sections with appropriate headings
3. Relevant legal citations and references from the context
4. Professional legal language appropriate for {document_type}
5. Compliance with the legal standards of {jurisdiction}

Format the document with numbered sections and clear headings.
Return only the document content without any additional explanations.""",

    "validate": """Analyze the following legal document for potential issues and provide a comprehensive validation report.

Document Content:
{content}

Please provide a detailed analysis including:
1. Legal validity assessment
2. Potential legal issues or inconsistencies
3. Missing required elements
4. Specific suggestions for improvement
5. Overall quality assessment

Format your response as:
VALIDITY: [Valid/Invalid/Needs Review]
ISSUES: [List of specific legal issues]
SUGGESTIONS: [List of improvement suggestions]
ANALYSIS: [Detailed analysis]""",
}

NO_CONTEXT = "(No relevant legal sources were found.)"
