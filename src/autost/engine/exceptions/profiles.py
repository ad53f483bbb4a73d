from typing import Union


class ProfileTableUnavailableException(Exception):
    def __init__(self, profiles_path: str, reason: Union[str, None] = None):
        self.profiles_path = profiles_path
        message = f"Unable to read the MLST profile table \"{profiles_path}\"."
        if reason is not None:
            message += f" ({reason})"
        super().__init__(message)

class MalformedAlleleNameException(ValueError):
    def __init__(self, allele_name: str, reason: str):
        self.allele_name = allele_name
        super().__init__(f"Unable to derive a locus and allele number from \"{allele_name}\": {reason}")

class BIGSdbProfileDownloadException(Exception):
    def __init__(self, database_name: str, schema_id: int, status: int):
        self.status = status
        super().__init__(f"Unable to download profiles for \"{database_name}\" under schema ID \"{schema_id}\" (HTTP {status}).")
