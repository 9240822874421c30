def share_url(base_url: str, record_number: str) -> str:
    """Public page of a record: {base_url}/document/{record_number}"""
    return f"{base_url.rstrip('/')}/document/{record_number}"


def viewable_url(base_url: str, file_path: str) -> str:
    """Direct link to a stored file, opened fit-to-width in PDF viewers."""
    return f"{base_url.rstrip('/')}/files/{file_path.lstrip('/')}#view=FitH"
