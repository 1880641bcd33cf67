SUMMARY_SYSTEM_PROMPT = """\
You are a helpful assistant that writes concise summaries of saved web articles.
Summarize the main points of the article in a few short paragraphs.
Do not add information that is not in the article."""

TAG_SYSTEM_PROMPT = """\
You are a helpful assistant that extracts relevant tags from content summaries.
Extract 3-5 short, relevant tags that categorize the content.
Return ONLY a comma-separated list of tags, nothing else.
Example: technology, programming, web development, javascript"""

TAG_USER_PROMPT_TEMPLATE = "Extract tags from this summary: \n\n{summary}"
