import os
import pickle

from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from googleapiclient.discovery import build

from logger_setup import setup_logger

logger, _ = setup_logger("google_service")

# metadata.readonly for folder searches, drive for permanent deletes
SCOPES = [
    'https://www.googleapis.com/auth/drive.metadata.readonly',
    'https://www.googleapis.com/auth/drive'
]


def connect_google(config):
    """
    Authenticate with Google Drive.
    Returns (service, message); service is None when authorization failed.
    """
    creds = None
    token_path = config.get("token_path", "token_google.pickle")
    secrets_path = config.get("client_secrets", "client_secrets.json")

    if os.path.exists(token_path):
        with open(token_path, 'rb') as token:
            creds = pickle.load(token)

    # Refresh or Login
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except Exception as e:
                logger.error(f"Failed to refresh token: {e}")
                creds = None

        if not creds:
            if not os.path.exists(secrets_path):
                logger.error(f"{secrets_path} not found")
                return None, f"{secrets_path} not found. Please download it from Google Cloud Console."

            try:
                flow = InstalledAppFlow.from_client_secrets_file(secrets_path, SCOPES)
                creds = flow.run_local_server(port=0)
            except Exception as e:
                logger.error(f"Auth flow failed: {e}")
                return None, str(e)

        with open(token_path, 'wb') as token:
            pickle.dump(creds, token)

    try:
        service = build('drive', 'v3', credentials=creds)

        # Test call
        about = service.about().get(fields="user").execute()
        user_info = about.get('user', {})
        account = user_info.get('displayName', 'Google User')
        email = user_info.get('emailAddress', '')

        logger.info(f"Connected to Google Drive as {account}")
        return service, f"Connected as: {account} ({email})"
    except Exception as e:
        logger.error(f"Failed to build service: {e}")
        return None, str(e)
