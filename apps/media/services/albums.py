"""Album organisation of the media library."""

import logging

from django.db import transaction

from apps.media.models import Album, AlbumType, SiteMedia

from .exceptions import AlbumError

logger = logging.getLogger(__name__)


class AlbumManagementService:
    """Create, edit and delete albums and move media between them."""

    @classmethod
    def create_album(cls, wedding, type_slug, data):
        if not type_slug:
            raise AlbumError('O tipo de álbum é obrigatório.', field='album_type')

        album_type = AlbumType.objects.filter(slug=type_slug).first()
        if album_type is None:
            raise AlbumError(
                f"Tipo de álbum inválido: '{type_slug}'. "
                f"Tipos válidos: {', '.join(AlbumType.get_slugs())}",
                field='album_type',
            )

        if not data.get('name'):
            raise AlbumError('O nome do álbum é obrigatório.', field='name')

        cover_media = cls._get_cover_media(wedding, data.get('cover_media_id'))

        album = Album.objects.create(
            wedding=wedding,
            album_type=album_type,
            name=data['name'],
            description=data.get('description'),
            cover_media=cover_media,
        )
        logger.info(f"[MEDIA] Album {album.id} ({type_slug}) created for wedding {wedding.id}")
        return album

    @classmethod
    def update_album(cls, album, data):
        """Only the keys present in ``data`` are changed."""
        update_fields = []

        if 'name' in data:
            if not data['name']:
                raise AlbumError('O nome do álbum não pode ser vazio.', field='name')
            album.name = data['name']
            update_fields.append('name')

        if 'description' in data:
            album.description = data['description']
            update_fields.append('description')

        if 'cover_media_id' in data:
            album.cover_media = cls._get_cover_media(album.wedding, data['cover_media_id'])
            update_fields.append('cover_media')

        if update_fields:
            album.save(update_fields=update_fields + ['updated_at'])

        album.refresh_from_db()
        return album

    @classmethod
    @transaction.atomic
    def delete_album(cls, album, move_to=None):
        """
        Delete ``album``.

        An album that still holds media needs a ``move_to`` album of the same
        wedding to receive them.
        """
        media_count = album.media.count()

        if media_count > 0:
            if move_to is None:
                raise AlbumError(
                    f"O álbum contém {media_count} arquivo(s) de mídia. "
                    f"Especifique um álbum de destino para mover os arquivos ou exclua-os primeiro."
                )
            if move_to.wedding_id != album.wedding_id:
                raise AlbumError('O álbum de destino deve pertencer ao mesmo casamento.', field='move_to')
            if move_to.pk == album.pk:
                raise AlbumError(
                    'O álbum de destino não pode ser o mesmo álbum que está sendo excluído.',
                    field='move_to',
                )

            album.media.update(album=move_to)
            logger.info(f"[MEDIA] Moved {media_count} media from album {album.id} to {move_to.id}")

        album.delete()
        return True

    @classmethod
    def move_media(cls, media, target_album):
        """Change the album of ``media``; the stored file is left untouched."""
        if media.wedding_id != target_album.wedding_id:
            raise AlbumError(
                'A mídia e o álbum de destino devem pertencer ao mesmo casamento.',
                field='album_id',
            )

        media.album = target_album
        media.save(update_fields=['album', 'updated_at'])
        return media

    @classmethod
    def get_albums_by_type(cls, wedding):
        """Albums of ``wedding`` keyed by type slug; every type is present."""
        grouped = {slug: [] for slug in AlbumType.get_slugs()}
        albums = (
            Album.objects
            .filter(wedding=wedding)
            .select_related('album_type', 'cover_media')
            .order_by('created_at')
        )
        for album in albums:
            grouped.setdefault(album.album_type.slug, []).append(album)
        return grouped

    @staticmethod
    def _get_cover_media(wedding, cover_media_id):
        if not cover_media_id:
            return None

        cover_media = SiteMedia.objects.filter(pk=cover_media_id, wedding=wedding).first()
        if cover_media is None:
            raise AlbumError(
                'A mídia de capa não foi encontrada ou não pertence a este casamento.',
                field='cover_media_id',
            )
        return cover_media
