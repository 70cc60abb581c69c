# i18n.py
import locale

MESSAGES = {
    "en": {
        "menu_title": "tubegrab {version}",
        "menu_video": "Download video",
        "menu_audio": "Download audio",
        "menu_convert": "Download video and convert",
        "menu_playlists": "Download everything in the playlist file",
        "menu_install": "Install downloader and transcoder",
        "menu_update": "Check for updates",
        "menu_settings": "Show settings",
        "menu_exit": "Exit",
        "menu_prompt": "Select an option",
        "menu_invalid": "'{choice}' is not a valid option.",
        "url_prompt": "URL (leave empty to go back)",
        "goodbye": "Bye.",
        "downloading": "Downloading {mode}: {url}",
        "playlist_section": "{count} {mode} URL(s) from the playlist file",
        "playlist_empty": "The playlist file '{path}' has no URLs.",
        "batch_summary": "{ok} succeeded, {failed} failed.",
        "installing": "Installing downloader and transcoder into '{path}'...",
        "checking_updates": "Checking for updates...",
        "update_up_to_date": "tubegrab {version} is up to date.",
        "update_installed": "A newer tubegrab was installed. Restart to use it.",
        "update_local_newer": "The published version is older than your local {version}. Reinstall manually to get back to a consistent state.",
        "created_paths": "Created {count} missing file(s) and folder(s) under '{home}'.",
        "settings_title": "Current settings",
        "conflict_video_audio": "--video and --audio cannot be used together.",
        "conflict_playlists_mode": "--playlists cannot be combined with --video or --audio.",
        "conflict_install_update": "--install and --update cannot be used together.",
        "conflict_maintenance_download": "--install and --update cannot be combined with downloads.",
        "conflict_convert_audio": "--convert only applies to video downloads.",
        "conflict_convert_alone": "--convert needs --video or --playlists.",
        "missing_url": "--video and --audio need --url.",
        "url_without_mode": "--url needs --video or --audio.",
        "no_action": "Nothing to do: choose --video, --audio, --playlists, --install or --update.",
        "help_video": "Download the URL as video.",
        "help_audio": "Download the URL as mp3 audio.",
        "help_playlists": "Download every URL listed in the playlist file.",
        "help_convert": "Convert downloaded video with the configured conversion options.",
        "help_url": "URL of the video, audio or playlist to download.",
        "help_output_path": "Folder to save downloads in, instead of the configured one.",
        "help_options": "Extra options passed to the downloader as-is.",
        "help_install": "Install the downloader and transcoder, then exit.",
        "help_update": "Update the downloader and check for a newer tubegrab, then exit.",
        "help_verbose": "Verbose downloader output and logging.",
        "help_no_archive": "Do not use the download archive.",
        "help_whole_playlist": "Treat every URL as a playlist.",
        "help_config": "Settings file to use instead of settings.yml in the home folder.",
        "help_lang": "Set the language for output messages (e.g., 'en' or 'fr').",
    },
    "fr": {
        "menu_title": "tubegrab {version}",
        "menu_video": "Télécharger une vidéo",
        "menu_audio": "Télécharger l'audio",
        "menu_convert": "Télécharger une vidéo et la convertir",
        "menu_playlists": "Tout télécharger depuis le fichier de playlists",
        "menu_install": "Installer le téléchargeur et le transcodeur",
        "menu_update": "Rechercher des mises à jour",
        "menu_settings": "Afficher les réglages",
        "menu_exit": "Quitter",
        "menu_prompt": "Choisissez une option",
        "menu_invalid": "'{choice}' n'est pas une option valide.",
        "url_prompt": "URL (vide pour revenir)",
        "goodbye": "Au revoir.",
        "downloading": "Téléchargement {mode} : {url}",
        "playlist_section": "{count} URL(s) {mode} depuis le fichier de playlists",
        "playlist_empty": "Le fichier de playlists '{path}' ne contient aucune URL.",
        "batch_summary": "{ok} réussi(s), {failed} en échec.",
        "installing": "Installation du téléchargeur et du transcodeur dans '{path}'...",
        "checking_updates": "Recherche de mises à jour...",
        "update_up_to_date": "tubegrab {version} est à jour.",
        "update_installed": "Une version plus récente de tubegrab a été installée. Relancez pour l'utiliser.",
        "update_local_newer": "La version publiée est plus ancienne que votre version locale {version}. Réinstallez manuellement pour retrouver un état cohérent.",
        "created_paths": "{count} fichier(s) et dossier(s) manquant(s) créé(s) dans '{home}'.",
        "settings_title": "Réglages actuels",
        "conflict_video_audio": "--video et --audio ne peuvent pas être utilisés ensemble.",
        "conflict_playlists_mode": "--playlists ne peut pas être combiné avec --video ou --audio.",
        "conflict_install_update": "--install et --update ne peuvent pas être utilisés ensemble.",
        "conflict_maintenance_download": "--install et --update ne peuvent pas être combinés avec un téléchargement.",
        "conflict_convert_audio": "--convert ne s'applique qu'aux vidéos.",
        "conflict_convert_alone": "--convert nécessite --video ou --playlists.",
        "missing_url": "--video et --audio nécessitent --url.",
        "url_without_mode": "--url nécessite --video ou --audio.",
        "no_action": "Rien à faire : choisissez --video, --audio, --playlists, --install ou --update.",
        "help_video": "Télécharger l'URL en vidéo.",
        "help_audio": "Télécharger l'URL en audio mp3.",
        "help_playlists": "Télécharger toutes les URL du fichier de playlists.",
        "help_convert": "Convertir la vidéo téléchargée avec les options de conversion configurées.",
        "help_url": "URL de la vidéo, de l'audio ou de la playlist à télécharger.",
        "help_output_path": "Dossier de destination à la place de celui configuré.",
        "help_options": "Options supplémentaires transmises telles quelles au téléchargeur.",
        "help_install": "Installer le téléchargeur et le transcodeur, puis quitter.",
        "help_update": "Mettre à jour le téléchargeur et chercher une version plus récente de tubegrab, puis quitter.",
        "help_verbose": "Sortie et journalisation détaillées.",
        "help_no_archive": "Ne pas utiliser l'archive de téléchargement.",
        "help_whole_playlist": "Traiter chaque URL comme une playlist.",
        "help_config": "Fichier de réglages à utiliser au lieu de settings.yml dans le dossier principal.",
        "help_lang": "Définit la langue des messages de sortie (ex: 'en' ou 'fr').",
    },
}

_current_lang = "en"


def get_default_lang():
    try:
        lang_code, _ = locale.getlocale()
        return "fr" if lang_code and lang_code.startswith("fr") else "en"
    except (ValueError, TypeError):
        return "en"


def set_lang(lang: str):
    global _current_lang
    _current_lang = lang if lang in MESSAGES else "en"


def get_message(key, **kwargs):
    lang = _current_lang
    if lang not in MESSAGES or key not in MESSAGES[lang]:
        # Fallback to English if key not found in current language
        lang = "en"

    message_template = MESSAGES[lang].get(key, f"Translation missing for key: {key}")

    try:
        return message_template.format(**kwargs)
    except KeyError as e:
        return f"Formatting error for key '{key}': missing placeholder {e}"


# Initialize with default system language
set_lang(get_default_lang())
